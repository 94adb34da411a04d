"""Domain errors."""


class DormPresenceError(Exception):
    """Base class for errors raised by dorm presence services."""


class InvalidScanRequestError(DormPresenceError):
    """The scan request is missing required data."""


class CardNotRecognizedError(DormPresenceError):
    """No user is registered for the scanned RFID card."""

    def __init__(self, rfid_value: str) -> None:
        super().__init__(f"No user found with RFID card {rfid_value!r}")
        self.rfid_value = rfid_value
