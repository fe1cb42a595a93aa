# doctor_directory/service/crud_appointments.py
import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId

from ..database import APPOINTMENTS_COLL, DOCTORS_COLL
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models import AppointmentCreate, Shift
from ..utils.mongo import is_object_id, parse_object_id, with_string_id
from .availability import parse_calendar_date

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"[0-9]{10}")
SHIFTS = {s.value for s in Shift}


def serialize_appointment(doc: dict) -> dict:
    doc = with_string_id(doc)
    if isinstance(doc.get("createdAt"), datetime):
        doc["createdAt"] = doc["createdAt"].isoformat()
    return doc


def validate_booking(req: AppointmentCreate) -> None:
    """Field-level checks. The date/shift pair is not checked against the
    doctor's current availability."""
    values = req.model_dump()
    if not all(isinstance(v, str) and v.strip() for v in values.values()):
        raise ValidationError("All fields are required")
    if not PHONE_RE.fullmatch(req.patientPhone):
        raise ValidationError("Please enter a valid 10-digit phone number")
    if req.shift not in SHIFTS:
        raise ValidationError("Shift must be 'morning' or 'evening'")
    parse_calendar_date(req.date)


async def book_appointment(db, req: AppointmentCreate) -> dict:
    validate_booking(req)

    if not is_object_id(req.doctorId) or not await db[DOCTORS_COLL].find_one(
        {"_id": ObjectId(req.doctorId)}, {"_id": 1}
    ):
        raise NotFoundError("Doctor not found")

    slot = {"doctorId": req.doctorId, "date": req.date, "shift": req.shift}
    already_booked = await db[APPOINTMENTS_COLL].count_documents(slot)
    if already_booked:
        # overbooking is allowed, only reported
        logger.warning("Slot %s already has %d booking(s)", slot, already_booked)

    appointment = {
        "doctorId": req.doctorId,
        "doctorName": req.doctorName,  # snapshot, never re-derived
        "patientName": req.patientName.strip(),
        "patientPhone": req.patientPhone,
        "date": req.date,
        "shift": req.shift,
        "createdAt": datetime.now(timezone.utc),
    }
    res = await db[APPOINTMENTS_COLL].insert_one(appointment)
    appointment["_id"] = res.inserted_id
    logger.info("Booked appointment %s for doctor %s on %s (%s)",
                res.inserted_id, req.doctorId, req.date, req.shift)
    return serialize_appointment(appointment)


async def list_doctor_appointments(db, doctor_id: str, date: Optional[str] = None) -> List[dict]:
    parse_object_id(doctor_id, "doctor ID")
    query = {"doctorId": doctor_id}
    if date:
        parse_calendar_date(date)
        query["date"] = date

    cursor = db[APPOINTMENTS_COLL].find(query, sort=[("date", 1), ("shift", 1)])
    docs = await cursor.to_list(length=None)
    return [serialize_appointment(d) for d in docs]


async def delete_appointment(db, appointment_id: str, doctor_id: str) -> None:
    """Remove an appointment owned by ``doctor_id`` (the authenticated doctor)."""
    oid = parse_object_id(appointment_id, "appointment ID")
    appointment = await db[APPOINTMENTS_COLL].find_one({"_id": oid})
    if not appointment:
        raise NotFoundError("Appointment not found")

    if str(appointment.get("doctorId")) != doctor_id:
        logger.warning("Doctor %s refused deletion of appointment %s", doctor_id, appointment_id)
        raise AuthorizationError("Unauthorized to delete this appointment")

    await db[APPOINTMENTS_COLL].delete_one({"_id": oid})
    logger.info("Deleted appointment %s", appointment_id)
