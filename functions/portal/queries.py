"""
Read-only submission listings with locators projected to public URLs.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional

from portal.db import SubmissionRecord, SubmissionStore
from portal.exceptions import SubmissionsNotFound, ValidationError


class QueryService:
    def __init__(
        self, store: SubmissionStore, public_url: Callable[[str], str]
    ):
        self.store = store
        self.public_url = public_url

    def _project(self, records: List[SubmissionRecord]) -> List[SubmissionRecord]:
        return [
            replace(
                record,
                file_paths=[self.public_url(path) for path in record.file_paths],
            )
            for record in records
        ]

    def list_by_owner(self, owner_name: Optional[str]) -> List[SubmissionRecord]:
        """An owner without submissions is reported as not found, not as an empty list."""
        if not owner_name:
            raise ValidationError("Senior name is required")
        records = self.store.list_submissions_by_owner(owner_name)
        if not records:
            raise SubmissionsNotFound("No files found for the specified senior")
        return self._project(records)

    def list_all(self) -> List[SubmissionRecord]:
        records = self.store.list_submissions()
        if not records:
            raise SubmissionsNotFound()
        return self._project(records)
