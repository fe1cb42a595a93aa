# doctor_directory/dependencies.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import AuthError, AuthorizationError
from .utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_doctor_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Doctor id from the bearer token issued at login."""
    if credentials is None:
        raise AuthError("Missing bearer token")
    return decode_access_token(credentials.credentials)


def require_same_doctor(doctor_id: str, current_doctor_id: str) -> None:
    if doctor_id != current_doctor_id:
        raise AuthorizationError("Not allowed to act for another doctor")
