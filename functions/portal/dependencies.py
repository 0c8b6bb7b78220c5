"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from fastapi import Depends

from portal.config import get_settings
from portal.credentials import CredentialService
from portal.db import DbClient, InMemoryDbClient, PostgresDbClient
from portal.passwords import PasswordHasher
from portal.queries import QueryService
from portal.storage import (
    CosStorageClient,
    InMemoryStorageClient,
    LocalStorageClient,
    StorageClient,
)
from portal.submissions import SubmissionService

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client; its engine pools connections across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    prefix = settings.upload_url_prefix.strip("/")
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient(
            base_url=settings.public_base_url, prefix=prefix
        )
    elif settings.cos_bucket:
        _storage_client = CosStorageClient(
            bucket=settings.cos_bucket,
            region=settings.cos_region or "",
            endpoint=settings.cos_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            base_url=settings.public_base_url,
            prefix=prefix,
        )
    else:
        _storage_client = LocalStorageClient(
            root=settings.upload_dir,
            base_url=settings.public_base_url,
            prefix=prefix,
        )
    return _storage_client


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


def get_credential_service(
    db: DbClient = Depends(get_db_client),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialService:
    return CredentialService(db, hasher)


def get_submission_service(
    db: DbClient = Depends(get_db_client),
) -> SubmissionService:
    return SubmissionService(db, max_files=get_settings().max_upload_files)


def get_query_service(
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
) -> QueryService:
    return QueryService(db, storage.public_url)
