"""
Guest-related Pydantic schemas
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator

class Attendance(str, Enum):
    """RSVP attendance decision"""
    YES = "yes"
    NO = "no"
    PENDING = "pending"

class RSVPRequest(BaseModel):
    """Schema for submitting or resubmitting an RSVP"""
    name: str = Field(..., min_length=1, max_length=255)
    attendance: Attendance

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

class CompanionUpdate(BaseModel):
    """Schema for lowering the companion allowance"""
    cantidad: int

class LookupRequest(BaseModel):
    """Guest lookup request"""
    name: str = Field(..., min_length=1)

class GuestResponse(BaseModel):
    """Guest record in display shape"""
    id: Union[int, str]
    name: str
    attendance: str
    cantidad_acompanante: int = Field(alias="cantidad_acompañante")
    timestamp: str
    mensaje_confirmacion: Optional[str] = None

    class Config:
        populate_by_name = True

class MasterGuestEntry(BaseModel):
    """Entry of the master guest list"""
    id: Optional[Union[int, str]] = None
    name: str
    pases: int
