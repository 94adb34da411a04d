"""Configuration adapters."""

from dorm_presence.adapters.config.app_config import AppConfig
from dorm_presence.adapters.config.seed_data_loader import SeedDataLoader

__all__ = ["AppConfig", "SeedDataLoader"]
