"""
Pydantic schemas package
"""

from .common import *
from .guest import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Attendance",
    "RSVPRequest",
    "CompanionUpdate",
    "LookupRequest",
    "GuestResponse",
    "MasterGuestEntry",
]
