# doctor_directory/models.py
import re
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


# date.weekday() order
WEEKDAYS = list(Weekday)

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class Shift(str, Enum):
    MORNING = "morning"
    EVENING = "evening"


def canonical_weekday(key) -> Optional[Weekday]:
    """Map "Monday", "MONDAY", " monday " ... onto Weekday.MONDAY, else None."""
    if not isinstance(key, str):
        return None
    try:
        return Weekday(key.strip().lower())
    except ValueError:
        return None


class ScheduleDay(BaseModel):
    morning: bool = False
    morningHours: str = ""   # display only, e.g. "9 AM - 1 PM"
    evening: bool = False
    eveningHours: str = ""


class Schedule(BaseModel):
    monday: ScheduleDay = Field(default_factory=ScheduleDay)
    tuesday: ScheduleDay = Field(default_factory=ScheduleDay)
    wednesday: ScheduleDay = Field(default_factory=ScheduleDay)
    thursday: ScheduleDay = Field(default_factory=ScheduleDay)
    friday: ScheduleDay = Field(default_factory=ScheduleDay)
    saturday: ScheduleDay = Field(default_factory=ScheduleDay)
    sunday: ScheduleDay = Field(default_factory=ScheduleDay)

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data):
        if not isinstance(data, dict):
            return data
        canonical = {}
        for key, value in data.items():
            day = canonical_weekday(key)
            if day is None:
                raise ValueError(f"Unknown schedule day: {key}")
            canonical[day.value] = value
        return canonical


class UnavailabilityRangeCreate(BaseModel):
    # Optional so the service can answer with its own messages
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    reason: Optional[str] = None


class UnavailabilityRange(BaseModel):
    id: Optional[str] = None
    startDate: str
    endDate: str
    reason: str = "Unavailable"

    @field_validator("startDate", "endDate")
    @classmethod
    def _calendar_date(cls, value: str) -> str:
        if not DATE_RE.fullmatch(value):
            raise ValueError("expected YYYY-MM-DD")
        date.fromisoformat(value)
        return value


class PersonalDetails(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    qualification: str = Field(..., min_length=1)
    designation: str = Field(..., min_length=1)


class GoogleMap(BaseModel):
    qlink: str = Field(..., min_length=1)


class PracticeDetails(BaseModel):
    specialty: str = Field(..., min_length=1)
    image_path: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    google_map: GoogleMap
    schedule: Schedule = Field(default_factory=Schedule)
    isOnline: bool = True
    unavailableDates: List[UnavailabilityRange] = Field(default_factory=list)


class Credentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class DoctorCreate(BaseModel):
    personalDetails: PersonalDetails
    practice_details: PracticeDetails
    credentials: Credentials


class PersonalDetailsUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    qualification: Optional[str] = Field(None, min_length=1)
    designation: Optional[str] = Field(None, min_length=1)


class PracticeDetailsUpdate(BaseModel):
    specialty: Optional[str] = Field(None, min_length=1)
    image_path: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    google_map: Optional[GoogleMap] = None
    schedule: Optional[Schedule] = None
    isOnline: Optional[bool] = None
    unavailableDates: Optional[List[UnavailabilityRange]] = None


class CredentialsUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)


class DoctorUpdate(BaseModel):
    """Partial update: only the fields present in the request are written."""
    personalDetails: Optional[PersonalDetailsUpdate] = None
    practice_details: Optional[PracticeDetailsUpdate] = None
    credentials: Optional[CredentialsUpdate] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class AppointmentCreate(BaseModel):
    # all optional: the booking validator reports missing fields itself
    doctorId: Optional[str] = None
    doctorName: Optional[str] = None
    patientName: Optional[str] = None
    patientPhone: Optional[str] = None
    date: Optional[str] = None
    shift: Optional[str] = None


class AppointmentDelete(BaseModel):
    doctorId: Optional[str] = None


class AvailableDate(BaseModel):
    date: str            # YYYY-MM-DD
    weekdayLabel: str    # "Monday"
    displayDate: str     # "Oct 17"


class ShiftOption(BaseModel):
    value: Shift
    label: str
    hours: str = ""
