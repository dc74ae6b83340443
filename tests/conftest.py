"""
Shared fixtures for the tracker test suite.

Every store runs on a fixed clock (Friday 2024-03-15) and starts empty
unless a test seeds it. HTTP tests talk to the real FastAPI app with a
fresh ``TrackerService`` swapped in per test.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from src.api.service import TrackerService
from src.api.webapp import app
from src.tracker.goal_analytics import GoalAnalytics
from src.tracker.habit_analytics import HabitAnalytics
from src.tracker.trading_analytics import TradingAnalytics
from src.tracker.tracker_store import MemoryTrackerStore

TODAY = date(2024, 3, 15)


class Clock:
    """Settable clock handed to the store."""

    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store(clock) -> MemoryTrackerStore:
    return MemoryTrackerStore(clock=clock)


@pytest.fixture
def habit_analytics(store) -> HabitAnalytics:
    return HabitAnalytics(store)


@pytest.fixture
def trading_analytics(store) -> TradingAnalytics:
    return TradingAnalytics(store)


@pytest.fixture
def goal_analytics(store) -> GoalAnalytics:
    return GoalAnalytics(store)


@pytest.fixture
def service(store) -> TrackerService:
    svc = TrackerService(store=store)
    TrackerService.set_instance(svc)
    yield svc
    TrackerService.set_instance(None)


@pytest.fixture
def client(service) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

