"""Log filter options domain model."""

from pydantic import BaseModel, ConfigDict


class FilterOptions(BaseModel):
    """Buildings and rooms offered as choices in the log filters."""

    model_config = ConfigDict(frozen=True)

    buildings: list[str]
    rooms: list[str]
