# doctor_directory/service/crud_unavailable_dates.py
import logging
from typing import List

from bson import ObjectId
from pymongo import ReturnDocument

from ..database import DOCTORS_COLL
from ..errors import NotFoundError, ValidationError
from ..models import UnavailabilityRangeCreate
from ..utils.mongo import parse_object_id
from .availability import parse_calendar_date
from .crud_doctors import get_raw_doctor, serialize_range

logger = logging.getLogger(__name__)


def _ledger(doc: dict) -> List[dict]:
    return [serialize_range(r) for r in (doc.get("practice_details") or {}).get("unavailableDates") or []]


async def list_unavailable_dates(db, doctor_id: str) -> List[dict]:
    return _ledger(await get_raw_doctor(db, doctor_id))


async def add_unavailable_dates(db, doctor_id: str, entry: UnavailabilityRangeCreate) -> List[dict]:
    """Append a closed range to the ledger and return the whole ledger."""
    oid = parse_object_id(doctor_id, "doctor ID")
    if not entry.startDate or not entry.endDate:
        raise ValidationError("Start and end dates are required")
    parse_calendar_date(entry.startDate, "startDate")
    parse_calendar_date(entry.endDate, "endDate")

    stored = {
        "_id": ObjectId(),
        "startDate": entry.startDate,
        "endDate": entry.endDate,
        "reason": entry.reason or "Unavailable",
    }
    doc = await db[DOCTORS_COLL].find_one_and_update(
        {"_id": oid},
        {"$push": {"practice_details.unavailableDates": stored}},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise NotFoundError("Doctor not found")

    logger.info("Doctor %s unavailable %s..%s (%s)",
                doctor_id, entry.startDate, entry.endDate, stored["reason"])
    return _ledger(doc)


async def delete_unavailable_dates(db, doctor_id: str, date_id: str) -> List[dict]:
    range_oid = parse_object_id(date_id, "date range ID")
    doc = await get_raw_doctor(db, doctor_id)

    ranges = (doc.get("practice_details") or {}).get("unavailableDates") or []
    if not any(r.get("_id") == range_oid for r in ranges):
        raise NotFoundError("Unavailable date range not found")

    doc = await db[DOCTORS_COLL].find_one_and_update(
        {"_id": doc["_id"]},
        {"$pull": {"practice_details.unavailableDates": {"_id": range_oid}}},
        return_document=ReturnDocument.AFTER,
    )
    logger.info("Doctor %s removed unavailable range %s", doctor_id, date_id)
    return _ledger(doc)
