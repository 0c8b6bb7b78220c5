"""
Recording uploaded file batches as submissions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from portal.db import SubmissionRecord, SubmissionStore
from portal.exceptions import NoFilesProvided, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 10


@dataclass(frozen=True)
class SubmissionForm:
    """Plain form fields sent alongside the uploaded files."""

    username: Optional[str] = None
    password: Optional[str] = None
    subject: Optional[str] = None
    links: Optional[str] = None


class SubmissionService:
    def __init__(self, store: SubmissionStore, max_files: int = DEFAULT_MAX_FILES):
        self.store = store
        self.max_files = max_files

    def check_batch_size(self, count: int) -> None:
        """Reject an oversized batch before any of its files is persisted."""
        if count > self.max_files:
            raise ValidationError("Too many files uploaded")

    def ingest(
        self, form: SubmissionForm, locators: Sequence[str]
    ) -> SubmissionRecord:
        """
        Record already-persisted blobs as one submission.

        ``locators`` must be in upload order; that order is stored as is.
        All locators are written in a single store call.
        """
        if not locators:
            raise NoFilesProvided()
        self.check_batch_size(len(locators))
        record = self.store.insert_submission(
            username=form.username,
            password=form.password,
            file_paths=list(locators),
            links=form.links,
            subject=form.subject,
        )
        logger.info(
            "Stored submission %s with %d file(s)", record.id, len(record.file_paths)
        )
        return record
