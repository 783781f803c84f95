"""
Master guest list model (read-only reference table)
"""

from sqlalchemy import Column, Integer, String

from app.core.db import Base

class MasterGuest(Base):
    __tablename__ = "invitados_maestro"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    pases = Column(Integer, nullable=False, default=1)

    def to_row(self) -> dict:
        return {"id": self.id, "name": self.name, "pases": self.pases}
