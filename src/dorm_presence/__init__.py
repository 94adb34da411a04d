"""Dormitory RFID presence tracking."""

__version__ = "0.1.0"
