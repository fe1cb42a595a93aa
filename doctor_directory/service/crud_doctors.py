# doctor_directory/service/crud_doctors.py
import logging
import re
from typing import List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from ..database import DOCTORS_COLL
from ..errors import AuthError, NotFoundError, ValidationError
from ..models import DoctorCreate, DoctorUpdate
from ..utils.mongo import parse_object_id, with_string_id
from ..utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def serialize_range(entry: dict) -> dict:
    entry = dict(entry)
    if "_id" in entry:
        entry = with_string_id(entry)
    return entry


def serialize_doctor(doc: dict) -> dict:
    """Public view of a doctor document: string ids, no password hash."""
    doc = with_string_id(doc)
    practice = doc.get("practice_details") or {}
    if "unavailableDates" in practice:
        practice["unavailableDates"] = [serialize_range(r) for r in practice["unavailableDates"]]
    credentials = doc.get("credentials") or {}
    doc["credentials"] = {"username": credentials.get("username")}
    return doc


def _stored_range(entry: dict) -> dict:
    """Ledger entry as stored: own ObjectId, reason defaulted."""
    entry_id = entry.get("id")
    return {
        "_id": ObjectId(entry_id) if entry_id and ObjectId.is_valid(entry_id) else ObjectId(),
        "startDate": entry["startDate"],
        "endDate": entry["endDate"],
        "reason": entry.get("reason") or "Unavailable",
    }


async def _ensure_username_free(db, username: str, exclude_id: Optional[ObjectId] = None):
    query = {"credentials.username": username}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    if await db[DOCTORS_COLL].find_one(query):
        raise ValidationError("Username already exists")


async def get_raw_doctor(db, doctor_id: str) -> dict:
    """Stored doctor document (ObjectIds and hash included) or NotFoundError."""
    oid = parse_object_id(doctor_id, "doctor ID")
    doc = await db[DOCTORS_COLL].find_one({"_id": oid})
    if not doc:
        raise NotFoundError("Doctor not found")
    return doc


async def get_doctor(db, doctor_id: str) -> dict:
    return serialize_doctor(await get_raw_doctor(db, doctor_id))


async def list_cities(db) -> List[str]:
    cities = await db[DOCTORS_COLL].distinct("practice_details.city")
    return sorted(c for c in cities if c)


async def list_specialties(db) -> List[str]:
    specialties = await db[DOCTORS_COLL].distinct("practice_details.specialty")
    return sorted(s for s in specialties if s)


async def search_doctors(db, city: Optional[str] = None, specialty: Optional[str] = None,
                         name: Optional[str] = None) -> List[dict]:
    """Filter by exact city/specialty and a case-insensitive name substring.

    Offline doctors are included; the client shows their status.
    """
    query = {}
    if city:
        query["practice_details.city"] = city
    if specialty:
        query["practice_details.specialty"] = specialty
    if name:
        query["personalDetails.name"] = {"$regex": re.escape(name), "$options": "i"}

    docs = await db[DOCTORS_COLL].find(query).to_list(length=None)
    logger.info("Doctor search %s -> %d result(s)", query, len(docs))
    return [serialize_doctor(d) for d in docs]


async def create_doctor(db, doctor: DoctorCreate) -> dict:
    data = doctor.model_dump()
    await _ensure_username_free(db, data["credentials"]["username"])

    password = data["credentials"].pop("password")
    data["credentials"]["passwordHash"] = hash_password(password)
    practice = data["practice_details"]
    practice["unavailableDates"] = [_stored_range(r) for r in practice["unavailableDates"]]

    res = await db[DOCTORS_COLL].insert_one(data)
    data["_id"] = res.inserted_id
    logger.info("Created doctor %s (%s)", res.inserted_id, data["personalDetails"]["name"])
    return serialize_doctor(data)


async def update_doctor(db, doctor_id: str, update: DoctorUpdate) -> dict:
    oid = parse_object_id(doctor_id, "doctor ID")
    changes = update.model_dump(exclude_unset=True)

    # nested sections are merged field by field
    fields = {}
    for section, values in changes.items():
        for key, value in (values or {}).items():
            fields[f"{section}.{key}"] = value

    username = fields.get("credentials.username")
    if username:
        await _ensure_username_free(db, username, exclude_id=oid)
    password = fields.pop("credentials.password", None)
    if password:
        fields["credentials.passwordHash"] = hash_password(password)
    if fields.get("practice_details.unavailableDates") is not None:
        fields["practice_details.unavailableDates"] = [
            _stored_range(r) for r in fields["practice_details.unavailableDates"]
        ]
    # drop explicit nulls so a section cannot be blanked out by accident
    fields = {k: v for k, v in fields.items() if v is not None}

    if fields:
        doc = await db[DOCTORS_COLL].find_one_and_update(
            {"_id": oid}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
    else:
        doc = await db[DOCTORS_COLL].find_one({"_id": oid})
    if not doc:
        raise NotFoundError("Doctor not found")

    logger.info("Updated doctor %s: %s", doctor_id, sorted(fields))
    return serialize_doctor(doc)


async def delete_doctor(db, doctor_id: str) -> None:
    # existing appointments keep their (now dangling) doctorId
    oid = parse_object_id(doctor_id, "doctor ID")
    res = await db[DOCTORS_COLL].delete_one({"_id": oid})
    if res.deleted_count == 0:
        raise NotFoundError("Doctor not found")
    logger.info("Deleted doctor %s", doctor_id)


async def authenticate_doctor(db, username: str, password: str) -> dict:
    doc = await db[DOCTORS_COLL].find_one({"credentials.username": username})
    if not doc:
        logger.info("Login failed, unknown username: %s", username)
        raise AuthError("Invalid credentials")
    if not verify_password(password, doc.get("credentials", {}).get("passwordHash")):
        logger.info("Login failed, bad password for: %s", username)
        raise AuthError("Invalid credentials")

    logger.info("Doctor login successful: %s", username)
    return {
        "id": str(doc["_id"]),
        "name": doc["personalDetails"]["name"],
        "specialty": doc["practice_details"]["specialty"],
    }


async def toggle_online_status(db, doctor_id: str) -> bool:
    doc = await get_raw_doctor(db, doctor_id)
    new_status = not doc.get("practice_details", {}).get("isOnline", True)
    await db[DOCTORS_COLL].update_one(
        {"_id": doc["_id"]}, {"$set": {"practice_details.isOnline": new_status}}
    )
    logger.info("Doctor %s is now %s", doctor_id, "online" if new_status else "offline")
    return new_status
