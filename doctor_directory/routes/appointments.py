# doctor_directory/routes/appointments.py
from typing import Optional

from fastapi import APIRouter, Body, Depends

from ..database import get_db
from ..dependencies import get_current_doctor_id, require_same_doctor
from ..models import AppointmentCreate, AppointmentDelete
from ..service.crud_appointments import book_appointment, delete_appointment, list_doctor_appointments

router = APIRouter()


@router.post("", status_code=201)
async def create_appointment(req: AppointmentCreate, db=Depends(get_db)):
    return await book_appointment(db, req)


@router.get("/doctor/{doctor_id}")
async def fetch_appointments_for_doctor(doctor_id: str, db=Depends(get_db)):
    return await list_doctor_appointments(db, doctor_id)


@router.delete("/{appointment_id}")
async def remove_appointment(
    appointment_id: str,
    body: Optional[AppointmentDelete] = Body(None),
    current_doctor_id: str = Depends(get_current_doctor_id),
    db=Depends(get_db),
):
    # a doctorId in the body must agree with the token
    if body is not None and body.doctorId:
        require_same_doctor(body.doctorId, current_doctor_id)
    await delete_appointment(db, appointment_id, current_doctor_id)
    return {"message": "Appointment deleted successfully"}
