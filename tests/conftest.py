from __future__ import annotations

import json
from typing import Any, List
from unittest.mock import MagicMock

import pytest

from assembly_sync.client import AssemblySuiteClient
from assembly_sync.tokens import TokenManager

BASE_URL = "https://suite.example"


class FakeClock:
    """Callable clock returning epoch seconds that tests advance by hand."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(status: int = 200, payload: Any = None, text: str | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response.text = text
    return response


def sent_json(session: MagicMock, call_index: int = -1) -> Any:
    call = session.request.call_args_list[call_index]
    return json.loads(call.kwargs["data"])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


def queue_responses(session: MagicMock, responses: List[MagicMock]) -> None:
    session.request.side_effect = responses


@pytest.fixture
def client(session: MagicMock) -> AssemblySuiteClient:
    """Authenticated client whose token stays fresh for an hour."""
    suite = AssemblySuiteClient(BASE_URL, session=session)
    suite.token_manager = TokenManager("jwt-token", "refresh-token", 3_600_000)
    return suite
