"""
Pydantic schemas for the portal API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

# Request fields are optional so that a missing field reaches the service
# and is reported as a 400 rather than a schema error.


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class AccountIdentity(BaseModel):
    id: int
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    message: str
    user: AccountIdentity


class SubmissionOut(BaseModel):
    id: int
    username: Optional[str] = None
    password: Optional[str] = None
    file_paths: list[str]
    links: Optional[str] = None
    subject: Optional[str] = None


class SubmissionListResponse(BaseModel):
    files: list[SubmissionOut]


class HealthResponse(BaseModel):
    status: str
