# doctor_directory/routes/doctors.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..database import get_db
from ..dependencies import get_current_doctor_id, require_same_doctor
from ..models import DoctorCreate, DoctorUpdate, LoginRequest, UnavailabilityRangeCreate
from ..service.crud_appointments import list_doctor_appointments
from ..service.crud_doctor_availability import get_available_dates, get_shifts_for_date
from ..service.crud_doctors import (
    authenticate_doctor,
    create_doctor,
    delete_doctor,
    get_doctor,
    list_cities,
    list_specialties,
    search_doctors,
    toggle_online_status,
    update_doctor,
)
from ..service.crud_unavailable_dates import (
    add_unavailable_dates,
    delete_unavailable_dates,
    list_unavailable_dates,
)
from ..utils.security import create_access_token

router = APIRouter()


@router.get("/cities")
async def fetch_cities(db=Depends(get_db)):
    return await list_cities(db)


@router.get("/specialties")
async def fetch_specialties(db=Depends(get_db)):
    return await list_specialties(db)


@router.get("", summary="Search doctors")
async def fetch_doctors(
    city: Optional[str] = None,
    specialty: Optional[str] = None,
    name: Optional[str] = Query(None, description="Case-insensitive substring"),
    db=Depends(get_db),
):
    return await search_doctors(db, city=city, specialty=specialty, name=name)


# Admin roster management
@router.post("", status_code=201)
async def add_doctor(doctor: DoctorCreate, db=Depends(get_db)):
    return await create_doctor(db, doctor)


@router.post("/login")
async def login(req: LoginRequest, db=Depends(get_db)):
    doctor = await authenticate_doctor(db, req.username, req.password)
    return {
        "doctor": doctor,
        "accessToken": create_access_token(doctor["id"]),
        "tokenType": "bearer",
    }


@router.get("/{doctor_id}")
async def fetch_doctor(doctor_id: str, db=Depends(get_db)):
    return await get_doctor(db, doctor_id)


@router.put("/{doctor_id}")
async def edit_doctor(doctor_id: str, update: DoctorUpdate, db=Depends(get_db)):
    return await update_doctor(db, doctor_id, update)


@router.delete("/{doctor_id}")
async def remove_doctor(doctor_id: str, db=Depends(get_db)):
    await delete_doctor(db, doctor_id)
    return {"message": "Doctor deleted successfully"}


@router.post("/{doctor_id}/toggle-status")
async def toggle_status(
    doctor_id: str,
    current_doctor_id: str = Depends(get_current_doctor_id),
    db=Depends(get_db),
):
    require_same_doctor(doctor_id, current_doctor_id)
    is_online = await toggle_online_status(db, doctor_id)
    return {
        "message": f"Doctor is now {'online' if is_online else 'offline'}",
        "isOnline": is_online,
    }


@router.get("/{doctor_id}/unavailable-dates")
async def fetch_unavailable_dates(doctor_id: str, db=Depends(get_db)):
    return await list_unavailable_dates(db, doctor_id)


@router.post("/{doctor_id}/unavailable-dates", status_code=201)
async def add_unavailable_date_range(
    doctor_id: str,
    entry: UnavailabilityRangeCreate,
    current_doctor_id: str = Depends(get_current_doctor_id),
    db=Depends(get_db),
):
    require_same_doctor(doctor_id, current_doctor_id)
    ledger = await add_unavailable_dates(db, doctor_id, entry)
    return {"message": "Unavailable dates added successfully", "unavailableDates": ledger}


@router.delete("/{doctor_id}/unavailable-dates/{date_id}")
async def remove_unavailable_date_range(
    doctor_id: str,
    date_id: str,
    current_doctor_id: str = Depends(get_current_doctor_id),
    db=Depends(get_db),
):
    require_same_doctor(doctor_id, current_doctor_id)
    ledger = await delete_unavailable_dates(db, doctor_id, date_id)
    return {"message": "Unavailable date range deleted successfully", "unavailableDates": ledger}


@router.get("/{doctor_id}/available-dates")
async def fetch_available_dates(doctor_id: str, db=Depends(get_db)):
    """Bookable days over the next 180 days, schedule minus unavailable ranges."""
    return await get_available_dates(db, doctor_id)


@router.get("/{doctor_id}/available-dates/{date}/shifts")
async def fetch_shifts_for_date(doctor_id: str, date: str, db=Depends(get_db)):
    return await get_shifts_for_date(db, doctor_id, date)


@router.get("/{doctor_id}/appointments")
async def fetch_doctor_appointments_by_date(
    doctor_id: str,
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    db=Depends(get_db),
):
    return await list_doctor_appointments(db, doctor_id, date)
