# doctor_directory/utils/mongo.py
from bson import ObjectId
from bson.errors import InvalidId

from ..errors import ValidationError


def parse_object_id(value: str, label: str = "ID") -> ObjectId:
    """ObjectId from a path/body string; 400 on anything malformed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} format")


def is_object_id(value) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


def with_string_id(doc: dict) -> dict:
    # ObjectId -> str so the document is clean JSON
    doc["id"] = str(doc["_id"])
    doc.pop("_id", None)
    return doc
