"""
Wedding guest (RSVP) model
"""

from sqlalchemy import Column, Integer, String, DateTime

from app.core.db import Base, utc_now

class WeddingGuest(Base):
    __tablename__ = "wedding_guests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    attendance = Column(String(20), nullable=False, default="pending")  # yes, no, pending
    cantidad_acompanante = Column("cantidad_acompañante", Integer, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "attendance": self.attendance,
            "cantidad_acompañante": self.cantidad_acompanante,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
