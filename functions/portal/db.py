"""
Account and submission stores for Postgres plus an in-memory test implementation.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol, Sequence

from sqlalchemy import (
    Column,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from portal.exceptions import ConstraintViolation, StorageError

logger = logging.getLogger(__name__)


@dataclass
class AccountRecord:
    id: int
    name: str
    email: str
    password_hash: str
    role: str
    created_at: float = field(default_factory=lambda: time.time())

    def as_identity(self) -> dict:
        """Public view of the account; never includes the digest."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


@dataclass
class SubmissionRecord:
    id: int
    username: Optional[str]
    password: Optional[str]
    file_paths: List[str]
    links: Optional[str]
    subject: Optional[str]
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "file_paths": list(self.file_paths),
            "links": self.links,
            "subject": self.subject,
        }


class AccountStore(Protocol):
    """Storage operations the credential service needs."""

    def find_account_by_email(self, email: str) -> Optional[AccountRecord]:
        ...

    def insert_account(
        self, name: str, email: str, password_hash: str, role: str
    ) -> AccountRecord:
        ...


class SubmissionStore(Protocol):
    """Storage operations for submission batches."""

    def insert_submission(
        self,
        username: Optional[str],
        password: Optional[str],
        file_paths: Sequence[str],
        links: Optional[str],
        subject: Optional[str],
    ) -> SubmissionRecord:
        ...

    def list_submissions_by_owner(self, username: str) -> List[SubmissionRecord]:
        ...

    def list_submissions(self) -> List[SubmissionRecord]:
        ...


class DbClient(AccountStore, SubmissionStore, Protocol):
    """A single client backing both stores."""


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.accounts: Dict[str, AccountRecord] = {}
        self.submissions: List[SubmissionRecord] = []
        self._lock = threading.Lock()
        self._account_ids = itertools.count(1)
        self._submission_ids = itertools.count(1)

    def find_account_by_email(self, email: str) -> Optional[AccountRecord]:
        return self.accounts.get(email)

    def insert_account(
        self, name: str, email: str, password_hash: str, role: str
    ) -> AccountRecord:
        with self._lock:
            if email in self.accounts:
                raise ConstraintViolation()
            record = AccountRecord(
                id=next(self._account_ids),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
            )
            self.accounts[email] = record
            return record

    def insert_submission(
        self,
        username: Optional[str],
        password: Optional[str],
        file_paths: Sequence[str],
        links: Optional[str],
        subject: Optional[str],
    ) -> SubmissionRecord:
        with self._lock:
            record = SubmissionRecord(
                id=next(self._submission_ids),
                username=username,
                password=password,
                file_paths=list(file_paths),
                links=links,
                subject=subject,
            )
            self.submissions.append(record)
            return record

    def list_submissions_by_owner(self, username: str) -> List[SubmissionRecord]:
        return [s for s in self.submissions if s.username == username]

    def list_submissions(self) -> List[SubmissionRecord]:
        return list(self.submissions)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.accounts.clear()
            self.submissions.clear()
            self._account_ids = itertools.count(1)
            self._submission_ids = itertools.count(1)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).

    The engine owns a connection pool; every operation checks out its own
    session and returns it before the call completes.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        session = self.Session()
        try:
            yield session
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            logger.warning("Constraint violation: %s", exc.orig)
            raise ConstraintViolation() from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database operation failed")
            raise StorageError() from exc
        finally:
            session.close()

    def _to_account_record(self, row: "AccountRow") -> AccountRecord:
        return AccountRecord(
            id=row.id,
            name=row.name,
            email=row.email,
            password_hash=row.password,
            role=row.role,
            created_at=row.created_at,
        )

    def _to_submission_record(self, row: "SubmissionRow") -> SubmissionRecord:
        return SubmissionRecord(
            id=row.id,
            username=row.username,
            password=row.password,
            file_paths=json.loads(row.file_paths),
            links=row.links,
            subject=row.subject,
            created_at=row.created_at,
        )

    def find_account_by_email(self, email: str) -> Optional[AccountRecord]:
        with self._session_scope() as session:
            stmt = select(AccountRow).where(AccountRow.email == email)
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return self._to_account_record(row)

    def insert_account(
        self, name: str, email: str, password_hash: str, role: str
    ) -> AccountRecord:
        with self._session_scope() as session:
            row = AccountRow(
                name=name,
                email=email,
                password=password_hash,
                role=role,
                created_at=time.time(),
            )
            session.add(row)
            session.flush()
            return self._to_account_record(row)

    def insert_submission(
        self,
        username: Optional[str],
        password: Optional[str],
        file_paths: Sequence[str],
        links: Optional[str],
        subject: Optional[str],
    ) -> SubmissionRecord:
        with self._session_scope() as session:
            row = SubmissionRow(
                username=username,
                password=password,
                file_paths=json.dumps(list(file_paths)),
                links=links,
                subject=subject,
                created_at=time.time(),
            )
            session.add(row)
            session.flush()
            return self._to_submission_record(row)

    def list_submissions_by_owner(self, username: str) -> List[SubmissionRecord]:
        with self._session_scope() as session:
            stmt = (
                select(SubmissionRow)
                .where(SubmissionRow.username == username)
                .order_by(SubmissionRow.id.asc())
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_submission_record(row) for row in rows]

    def list_submissions(self) -> List[SubmissionRecord]:
        with self._session_scope() as session:
            stmt = select(SubmissionRow).order_by(SubmissionRow.id.asc())
            rows = session.execute(stmt).scalars().all()
            return [self._to_submission_record(row) for row in rows]


Base = declarative_base()


class AccountRow(Base):
    __tablename__ = "users_auth"
    __table_args__ = (UniqueConstraint("email", name="uq_users_auth_email"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    password = Column(String, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(Float, nullable=False)


class SubmissionRow(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=True, index=True)
    password = Column(String, nullable=True)
    file_paths = Column(Text, nullable=False)
    links = Column(Text, nullable=True)
    subject = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
