from __future__ import annotations

import pytest

from fakes import FakeIntake


@pytest.fixture()
def intake(monkeypatch: pytest.MonkeyPatch) -> FakeIntake:
    """Route `requests.request` in the client module to an in-memory intake."""
    fake = FakeIntake()
    monkeypatch.setattr("ddlogs.client.requests.request", fake.request)
    return fake
