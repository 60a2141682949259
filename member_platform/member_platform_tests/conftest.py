import os

# Must be set before the service settings are first imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./member_test.db")
os.environ.setdefault("JWT_SECRET", "test-signing-key-0123456789abcdefghij")
os.environ.setdefault("DB_RECONNECT_DELAY_SECONDS", "0.05")

import time
import uuid

import pytest
from fastapi.testclient import TestClient

from member_platform.member_platform.member_service.main import app
from member_platform.member_platform.member_service.db import Base


def wait_until_ready(client, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if client.get("/ready").status_code == 200:
            return
        time.sleep(0.05)
    raise AssertionError("member store never became ready")


@pytest.fixture
def client():
    with TestClient(app) as c:
        wait_until_ready(c)
        # Fresh tables for every test
        engine = app.state.store.engine
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        yield c


@pytest.fixture
def new_user():
    unique = uuid.uuid4().hex[:8]
    return {
        "name": "Bob Smith",
        "email": f"user_{unique}@example.com",
        "password": "testing12345",
    }
