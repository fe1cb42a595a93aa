# doctor_directory/service/crud_doctor_availability.py
from datetime import date
from typing import List, Optional

from ..models import AvailableDate, ShiftOption
from .availability import available_dates, shifts_for_date
from .crud_doctors import get_raw_doctor


async def get_available_dates(db, doctor_id: str, today: Optional[date] = None) -> List[AvailableDate]:
    doc = await get_raw_doctor(db, doctor_id)
    practice = doc.get("practice_details") or {}
    return available_dates(
        practice.get("schedule"),
        practice.get("unavailableDates"),
        today or date.today(),
    )


async def get_shifts_for_date(db, doctor_id: str, day: str) -> List[ShiftOption]:
    # always read the live ledger, never a cached date list
    doc = await get_raw_doctor(db, doctor_id)
    practice = doc.get("practice_details") or {}
    return shifts_for_date(practice.get("schedule"), practice.get("unavailableDates"), day)
