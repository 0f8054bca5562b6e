"""
Shared fixtures.

The app runs against an in-memory mongomock database and a recording
mailer, wired in through FastAPI dependency overrides.
"""
from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.db.mongodb import get_mongo_db, init_mongo_indexes
from app.main import app
from app.services.mail_service import OtpMailer, get_mailer
from app.services.mongo_service import utcnow


class RecordingMailer(OtpMailer):
    """Keeps every (email, otp) it was asked to send."""

    def __init__(self):
        self.sent = []

    def send_otp(self, email, otp):
        self.sent.append((email, otp))

    def last_code(self, email):
        codes = [otp for to, otp in self.sent if to == email]
        return codes[-1] if codes else None


class FailingMailer(OtpMailer):
    def send_otp(self, email, otp):
        raise ConnectionRefusedError("smtp relay down")


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, start=None):
        self.now = start or utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def db():
    database = mongomock.MongoClient()["careerhub_test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(db, mailer):
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_mailer] = lambda: mailer
    # Unhandled errors must come back as 500 responses, not raise in the test
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def register_account(client, mailer):
    """Run the OTP + register flow over HTTP; returns the register response JSON."""

    def _register(email="jane@example.com", password="S3cret!pass", role="seeker"):
        resp = client.post("/api/auth/request-otp", json={"email": email})
        assert resp.status_code == 200, resp.text
        resp = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "role": role,
            "userOtp": mailer.last_code(email),
        })
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register
