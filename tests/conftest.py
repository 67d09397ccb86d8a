"""Shared fixtures for action selector tests."""
from __future__ import annotations

from typing import Any, List
from unittest.mock import Mock

import pytest

from action_selector import Action


class RecordingStore:
    """Minimal store exposing get_state() and dispatch(), recording every call."""

    def __init__(self, state: Any = None, dispatch_result: Any = None):
        self._state = state
        self.dispatched: List[Any] = []
        self.state_reads = 0
        self.dispatch_result = dispatch_result

    def get_state(self) -> Any:
        self.state_reads += 1
        return self._state

    def set_state(self, state: Any) -> None:
        self._state = state

    def dispatch(self, action: Any) -> Any:
        self.dispatched.append(action)
        return self.dispatch_result


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore(state={"session": {"user_id": "u-1"}, "todos": {"count": 2}})


@pytest.fixture
def action_creator() -> Mock:
    """Action creator capturing the positional args it was called with."""
    return Mock(side_effect=lambda *args: Action("dummy_action", args))


@pytest.fixture
def next_dispatch() -> Mock:
    return Mock(return_value="next-result")
