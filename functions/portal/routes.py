"""
HTTP routes for the submission portal.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile as StarletteUploadFile

from portal.credentials import CredentialService
from portal.dependencies import (
    get_credential_service,
    get_query_service,
    get_storage_client,
    get_submission_service,
)
from portal.queries import QueryService
from portal.schemas import (
    AccountIdentity,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SubmissionListResponse,
    SubmissionOut,
)
from portal.storage import StorageClient
from portal.submissions import SubmissionForm, SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()


def _form_text(form: FormData, key: str) -> Optional[str]:
    value = form.get(key)
    return value if isinstance(value, str) else None


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@router.post("/signup", response_model=MessageResponse, status_code=201)
def signup(
    payload: SignupRequest,
    service: CredentialService = Depends(get_credential_service),
):
    service.signup(payload.name, payload.email, payload.password, payload.role)
    return MessageResponse(message="User registered successfully!")


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
):
    account = service.login(payload.email, payload.password)
    return LoginResponse(
        message="Login successful!",
        user=AccountIdentity(**account.as_identity()),
    )


@router.post("/SrDashboard", response_model=MessageResponse)
async def upload_submission(
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
    storage: StorageClient = Depends(get_storage_client),
):
    """
    Persist the uploaded files in order, then record them as one submission.

    A browser form sent with no file chosen still carries one ``files`` part
    with an empty filename. Parts without a filename are not uploads.
    """
    async with request.form() as form:
        uploads = [
            item
            for item in form.getlist("files")
            if isinstance(item, StarletteUploadFile) and item.filename
        ]
        service.check_batch_size(len(uploads))
        logger.info("Files received: %s", [upload.filename for upload in uploads])

        locators = []
        for upload in uploads:
            locators.append(
                await run_in_threadpool(storage.save, upload.filename, upload.file)
            )
        submission = SubmissionForm(
            username=_form_text(form, "username"),
            password=_form_text(form, "password"),
            subject=_form_text(form, "subject"),
            links=_form_text(form, "links"),
        )
    await run_in_threadpool(service.ingest, submission, locators)
    return MessageResponse(message="Files uploaded and saved successfully")


@router.get("/Jrdashboard", response_model=SubmissionListResponse)
def list_owner_submissions(
    seniorname: Optional[str] = Query(None),
    service: QueryService = Depends(get_query_service),
):
    records = service.list_by_owner(seniorname)
    return SubmissionListResponse(
        files=[SubmissionOut(**record.as_dict()) for record in records]
    )


@router.get("/explore", response_model=SubmissionListResponse)
def explore(service: QueryService = Depends(get_query_service)):
    records = service.list_all()
    return SubmissionListResponse(
        files=[SubmissionOut(**record.as_dict()) for record in records]
    )


# Bodies that fail to parse are reported as the route's missing-fields error.
MALFORMED_BODY_MESSAGES = {
    signup: "All fields are required",
    login: "Email and password are required",
}


def error_field(endpoint) -> str:
    """Return the response key the client reads an endpoint's error from."""
    return "message" if endpoint is signup else "error"
