"""
Excel export of RSVP responses for the organizers
"""

import io
from typing import Any, Dict, List

import pandas as pd

from app.schemas.guest import Attendance
from app.services.stores import COMPANIONS_COLUMN

ATTENDANCE_LABELS = {
    Attendance.YES.value: "Sí",
    Attendance.NO.value: "No",
    Attendance.PENDING.value: "Pendiente",
}

class ExcelService:
    """Service for handling Excel operations"""

    COLUMNS = ['Nombre', 'Asistencia', 'Acompañantes', 'Fecha']
    SHEET_NAME = 'Invitados'

    @staticmethod
    def guests_dataframe(guests: List[Dict[str, Any]]) -> pd.DataFrame:
        """Build a DataFrame from guests in display shape"""
        data = [
            {
                'Nombre': guest['name'],
                'Asistencia': ATTENDANCE_LABELS.get(guest['attendance'], guest['attendance']),
                'Acompañantes': guest[COMPANIONS_COLUMN],
                'Fecha': guest['timestamp'],
            }
            for guest in guests
        ]
        return pd.DataFrame(data, columns=ExcelService.COLUMNS)

    @staticmethod
    def export_guests(guests: List[Dict[str, Any]]) -> bytes:
        """Export guests to Excel"""
        df = ExcelService.guests_dataframe(guests)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=ExcelService.SHEET_NAME)

        return buffer.getvalue()

    @staticmethod
    def summary(guests: List[Dict[str, Any]]) -> Dict[str, int]:
        """Totals by attendance plus companions of confirmed guests"""
        if not guests:
            return {"total": 0, "confirmed": 0, "declined": 0, "pending": 0, "confirmed_companions": 0}

        df = pd.DataFrame(guests)
        counts = df['attendance'].value_counts()
        confirmed = df[df['attendance'] == Attendance.YES.value]

        return {
            "total": int(len(df)),
            "confirmed": int(counts.get(Attendance.YES.value, 0)),
            "declined": int(counts.get(Attendance.NO.value, 0)),
            "pending": int(counts.get(Attendance.PENDING.value, 0)),
            "confirmed_companions": int(confirmed[COMPANIONS_COLUMN].sum()),
        }
