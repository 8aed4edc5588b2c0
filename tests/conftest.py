import itertools
from datetime import date
from typing import Any, Dict, List

import pytest

from rise import create_app
from rise.config import TestingConfig
from rise.errors import UpstreamError
from rise.services.record_store import RecordStore


class FakeRecordStore(RecordStore):
    """In-memory stand-in for Airtable keyed by (base, table)."""

    def __init__(self):
        self.tables: Dict[tuple, List[Dict[str, Any]]] = {}
        self.failing_tables = set()
        self.created: List[Dict[str, Any]] = []
        self.updated: List[tuple] = []
        self._ids = itertools.count(1)

    def add(self, base_id, table, fields, created_time="2024-06-01T10:00:00.000Z", record_id=None):
        record = {
            "id": record_id or f"rec{next(self._ids):05d}",
            "createdTime": created_time,
            "fields": dict(fields),
        }
        self.tables.setdefault((base_id, table), []).append(record)
        return record

    def _check(self, table):
        if table in self.failing_tables:
            raise UpstreamError("Airtable API error: 503 Service Unavailable", upstream_status=503, retryable=True)

    def fetch(self, base_id, table, match=None, ignore_case=False):
        self._check(table)
        records = self.tables.get((base_id, table), [])
        if not match:
            return list(records)

        def norm(value):
            value = "" if value is None else str(value)
            return value.strip().lower() if ignore_case else value

        return [
            r for r in records
            if all(norm(r["fields"].get(k)) == norm(v) for k, v in match.items())
        ]

    def create(self, base_id, table, fields):
        self._check(table)
        record = self.add(base_id, table, fields, created_time="2024-06-12T12:00:00.000Z")
        self.created.append(record)
        return record

    def update(self, base_id, table, record_id, fields):
        self._check(table)
        for record in self.tables.get((base_id, table), []):
            if record["id"] == record_id:
                record["fields"].update(fields)
                self.updated.append((record_id, dict(fields)))
                return record
        raise UpstreamError("Airtable API error: 404 Not Found", upstream_status=404)


@pytest.fixture
def config():
    return TestingConfig()


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def verified_tokens():
    """credential -> Google payload accepted by the fake verifier."""
    return {}


@pytest.fixture
def app(config, store, verified_tokens):
    from rise.errors import AuthorizationError

    def verifier(credential):
        if credential not in verified_tokens:
            raise AuthorizationError("Invalid Google credential: bad signature")
        return verified_tokens[credential]

    return create_app(config, store=store, identity_verifier=verifier)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def today(monkeypatch):
    """Freeze the service's notion of today at Wednesday 2024-06-12 (UTC)."""
    frozen = date(2024, 6, 12)
    monkeypatch.setattr(
        "rise.services.availability_service.utc_today", lambda now=None: frozen
    )
    return frozen


@pytest.fixture
def enroll(store, config):
    def _enroll(program_id="P-100", student="Asha Rao", student_email="asha@example.com",
                mentor_email="mentor@example.com"):
        return store.add(
            config.SCHEDULING_BASE_ID,
            config.ENROLLMENTS_TABLE,
            {
                "Program ID": program_id,
                "Student Name": student,
                "Student Email": student_email,
                "Mentor Email": mentor_email,
            },
        )

    return _enroll


@pytest.fixture
def add_submission(store, config):
    def _add(program_id, week, availability="", created_time="2024-06-01T10:00:00.000Z",
             student="Asha Rao"):
        return store.add(
            config.SCHEDULING_BASE_ID,
            config.AVAILABILITY_TABLE,
            {
                "Program ID": program_id,
                "Student Name": student,
                "Week": week,
                "Availability": availability,
            },
            created_time=created_time,
        )

    return _add
