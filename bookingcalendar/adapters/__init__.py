"""
Adapters layer - Storage integrations for bookings and resources.
"""

from .json_repository import JsonBookingRepository, SAMPLE_DATA_FILE

__all__ = ["JsonBookingRepository", "SAMPLE_DATA_FILE"]
