# doctor_directory/database.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .config import settings

DOCTORS_COLL = "doctors"
APPOINTMENTS_COLL = "appointments"

client = AsyncIOMotorClient(settings.MONGO_URI)
db = client[settings.DB_NAME]


def get_db() -> AsyncIOMotorDatabase:
    return db
