"""Donation point records and their SQLite storage."""

from .schemas import DonationPointPayload
from .service import DonationPoint, DonationPointService

__all__ = ["DonationPoint", "DonationPointPayload", "DonationPointService"]
