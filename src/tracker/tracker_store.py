"""
Tracker Storage Engine
======================

``TrackerStore`` is the storage contract the analytics engines and the API
depend on. ``MemoryTrackerStore`` keeps everything in process memory: one
dict per entity kind plus a monotonically increasing id counter per kind.

Keys:
  habits, trades, goals      — synthetic id
  habit completions          — (habit_id, date)
  check-ins, journal, risk   — date

Habits and goals are soft-deleted (``is_active=False``); trade reviews are
removed outright. Upserts on an existing key keep the original id.
"""

from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import fields, replace
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from src.tracker.tracker_models import (
    EmotionalCheckIn,
    GoalTracking,
    Habit,
    HabitCompletion,
    JournalEntry,
    RiskMetrics,
    TradeReview,
)

logger = logging.getLogger("tracker_store")


DEFAULT_HABITS: List[Dict[str, str]] = [
    {
        "name": "Avoid Overtrading",
        "description": "Maximum 3 trades per day, focus on quality over quantity",
        "category": "Risk Management",
    },
    {
        "name": "Honor Stop Losses",
        "description": "Exit positions when stop loss is hit, no exceptions",
        "category": "Risk Management",
    },
    {
        "name": "Wait for Setup",
        "description": "Only trade when all criteria are met, be patient",
        "category": "Emotional Control",
    },
    {
        "name": "Review Trades Daily",
        "description": "Spend 10 minutes analyzing today's trades",
        "category": "Analysis & Research",
    },
]


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class TrackerStore(ABC):
    """Storage contract: CRUD plus the date-keyed upserts."""

    @abstractmethod
    def today(self) -> date:
        """The store clock; used to stamp soft deletes."""

    # ─── HABITS ─────────────────────────────────────────────────

    @abstractmethod
    def list_habits(self, include_inactive: bool = False) -> List[Habit]: ...

    @abstractmethod
    def get_habit(self, habit_id: int) -> Optional[Habit]: ...

    @abstractmethod
    def create_habit(self, **values: Any) -> Habit: ...

    @abstractmethod
    def update_habit(self, habit_id: int, **updates: Any) -> Optional[Habit]: ...

    @abstractmethod
    def delete_habit(self, habit_id: int) -> bool: ...

    # ─── HABIT COMPLETIONS ──────────────────────────────────────

    @abstractmethod
    def get_habit_completions(self, habit_id: int, start: Optional[date] = None,
                              end: Optional[date] = None) -> List[HabitCompletion]: ...

    @abstractmethod
    def get_habit_completion(self, habit_id: int, day: date) -> Optional[HabitCompletion]: ...

    @abstractmethod
    def upsert_habit_completion(self, habit_id: int, day: date,
                                completed: bool) -> HabitCompletion: ...

    # ─── CHECK-INS & JOURNAL ────────────────────────────────────

    @abstractmethod
    def get_emotional_checkin(self, day: date) -> Optional[EmotionalCheckIn]: ...

    @abstractmethod
    def upsert_emotional_checkin(self, day: date, mood: str) -> EmotionalCheckIn: ...

    @abstractmethod
    def get_journal_entry(self, day: date) -> Optional[JournalEntry]: ...

    @abstractmethod
    def upsert_journal_entry(self, day: date, content: str) -> JournalEntry: ...

    # ─── TRADES ─────────────────────────────────────────────────

    @abstractmethod
    def list_trades(self, start: Optional[date] = None,
                    end: Optional[date] = None) -> List[TradeReview]: ...

    @abstractmethod
    def get_trade(self, trade_id: int) -> Optional[TradeReview]: ...

    @abstractmethod
    def create_trade(self, **values: Any) -> TradeReview: ...

    @abstractmethod
    def update_trade(self, trade_id: int, **updates: Any) -> Optional[TradeReview]: ...

    @abstractmethod
    def delete_trade(self, trade_id: int) -> bool: ...

    # ─── GOALS ──────────────────────────────────────────────────

    @abstractmethod
    def list_goals(self, include_inactive: bool = False) -> List[GoalTracking]: ...

    @abstractmethod
    def get_goal(self, goal_id: int) -> Optional[GoalTracking]: ...

    @abstractmethod
    def create_goal(self, **values: Any) -> GoalTracking: ...

    @abstractmethod
    def update_goal(self, goal_id: int, **updates: Any) -> Optional[GoalTracking]: ...

    @abstractmethod
    def delete_goal(self, goal_id: int) -> bool: ...

    # ─── RISK METRICS ───────────────────────────────────────────

    @abstractmethod
    def list_risk_metrics(self, start: Optional[date] = None,
                          end: Optional[date] = None) -> List[RiskMetrics]: ...

    @abstractmethod
    def get_risk_metrics(self, day: date) -> Optional[RiskMetrics]: ...

    @abstractmethod
    def upsert_risk_metrics(self, day: date, **values: Any) -> RiskMetrics: ...


class MemoryTrackerStore(TrackerStore):
    """
    Process-lifetime store. Every public method runs under one re-entrant
    lock, so callers always observe a consistent snapshot.
    """

    def __init__(self, seed_defaults: bool = False,
                 clock: Optional[Callable[[], date]] = None):
        self._clock = clock or date.today
        self._lock = threading.RLock()

        self._habits: Dict[int, Habit] = {}
        self._completions: Dict[Tuple[int, date], HabitCompletion] = {}
        self._checkins: Dict[date, EmotionalCheckIn] = {}
        self._journal: Dict[date, JournalEntry] = {}
        self._trades: Dict[int, TradeReview] = {}
        self._goals: Dict[int, GoalTracking] = {}
        self._risk: Dict[date, RiskMetrics] = {}

        self._ids = {
            kind: itertools.count(1)
            for kind in ("habit", "completion", "checkin", "journal", "trade", "goal", "risk")
        }

        if seed_defaults:
            for habit in DEFAULT_HABITS:
                self.create_habit(**habit)
        logger.info("MemoryTrackerStore initialized (seeded=%s)", seed_defaults)

    def _next_id(self, kind: str) -> int:
        return next(self._ids[kind])

    @staticmethod
    def _merge(record, updates: Dict[str, Any], protected: Tuple[str, ...] = ("id",)):
        allowed = {f.name for f in fields(record)} - set(protected)
        unknown = set(updates) - allowed
        if unknown:
            raise TypeError(f"unknown or protected fields: {sorted(unknown)}")
        return replace(record, **updates)

    def today(self) -> date:
        return self._clock()

    # ─── HABITS ─────────────────────────────────────────────────

    def list_habits(self, include_inactive: bool = False) -> List[Habit]:
        with self._lock:
            return [h for h in self._habits.values() if include_inactive or h.is_active]

    def get_habit(self, habit_id: int) -> Optional[Habit]:
        with self._lock:
            return self._habits.get(habit_id)

    def create_habit(self, **values: Any) -> Habit:
        with self._lock:
            values = {k: v for k, v in values.items() if k not in ("is_active", "deactivated_on")}
            habit = Habit(id=self._next_id("habit"), **values)
            self._habits[habit.id] = habit
            return habit

    def update_habit(self, habit_id: int, **updates: Any) -> Optional[Habit]:
        with self._lock:
            habit = self._habits.get(habit_id)
            if not habit:
                return None
            habit = self._merge(habit, updates, protected=("id", "is_active", "deactivated_on"))
            self._habits[habit_id] = habit
            return habit

    def delete_habit(self, habit_id: int) -> bool:
        with self._lock:
            habit = self._habits.get(habit_id)
            if not habit:
                return False
            if habit.is_active:
                self._habits[habit_id] = replace(habit, is_active=False,
                                                 deactivated_on=self.today())
            return True

    # ─── HABIT COMPLETIONS ──────────────────────────────────────

    def get_habit_completions(self, habit_id: int, start: Optional[date] = None,
                              end: Optional[date] = None) -> List[HabitCompletion]:
        with self._lock:
            return [
                c for c in self._completions.values()
                if c.habit_id == habit_id and _in_range(c.date, start, end)
            ]

    def get_habit_completion(self, habit_id: int, day: date) -> Optional[HabitCompletion]:
        with self._lock:
            return self._completions.get((habit_id, day))

    def upsert_habit_completion(self, habit_id: int, day: date,
                                completed: bool) -> HabitCompletion:
        with self._lock:
            key = (habit_id, day)
            existing = self._completions.get(key)
            if existing:
                record = replace(existing, completed=completed)
            else:
                record = HabitCompletion(id=self._next_id("completion"), habit_id=habit_id,
                                         date=day, completed=completed)
            self._completions[key] = record
            return record

    # ─── CHECK-INS & JOURNAL ────────────────────────────────────

    def get_emotional_checkin(self, day: date) -> Optional[EmotionalCheckIn]:
        with self._lock:
            return self._checkins.get(day)

    def upsert_emotional_checkin(self, day: date, mood: str) -> EmotionalCheckIn:
        with self._lock:
            existing = self._checkins.get(day)
            if existing:
                record = replace(existing, mood=mood)
            else:
                record = EmotionalCheckIn(id=self._next_id("checkin"), date=day, mood=mood)
            self._checkins[day] = record
            return record

    def get_journal_entry(self, day: date) -> Optional[JournalEntry]:
        with self._lock:
            return self._journal.get(day)

    def upsert_journal_entry(self, day: date, content: str) -> JournalEntry:
        with self._lock:
            existing = self._journal.get(day)
            if existing:
                record = replace(existing, content=content)
            else:
                record = JournalEntry(id=self._next_id("journal"), date=day, content=content)
            self._journal[day] = record
            return record

    # ─── TRADES ─────────────────────────────────────────────────

    def list_trades(self, start: Optional[date] = None,
                    end: Optional[date] = None) -> List[TradeReview]:
        with self._lock:
            trades = [t for t in self._trades.values() if _in_range(t.date, start, end)]
        trades.sort(key=lambda t: (t.date, t.id), reverse=True)
        return trades

    def get_trade(self, trade_id: int) -> Optional[TradeReview]:
        with self._lock:
            return self._trades.get(trade_id)

    def create_trade(self, **values: Any) -> TradeReview:
        with self._lock:
            trade = TradeReview(id=self._next_id("trade"), **values)
            self._trades[trade.id] = trade
            return trade

    def update_trade(self, trade_id: int, **updates: Any) -> Optional[TradeReview]:
        with self._lock:
            trade = self._trades.get(trade_id)
            if not trade:
                return None
            trade = self._merge(trade, updates)
            self._trades[trade_id] = trade
            return trade

    def delete_trade(self, trade_id: int) -> bool:
        with self._lock:
            return self._trades.pop(trade_id, None) is not None

    # ─── GOALS ──────────────────────────────────────────────────

    def list_goals(self, include_inactive: bool = False) -> List[GoalTracking]:
        with self._lock:
            return [g for g in self._goals.values() if include_inactive or g.is_active]

    def get_goal(self, goal_id: int) -> Optional[GoalTracking]:
        with self._lock:
            return self._goals.get(goal_id)

    def create_goal(self, **values: Any) -> GoalTracking:
        with self._lock:
            values.pop("is_active", None)
            goal = GoalTracking(id=self._next_id("goal"), **values)
            self._goals[goal.id] = goal
            return goal

    def update_goal(self, goal_id: int, **updates: Any) -> Optional[GoalTracking]:
        with self._lock:
            goal = self._goals.get(goal_id)
            if not goal:
                return None
            goal = self._merge(goal, updates, protected=("id", "is_active"))
            self._goals[goal_id] = goal
            return goal

    def delete_goal(self, goal_id: int) -> bool:
        with self._lock:
            goal = self._goals.get(goal_id)
            if not goal:
                return False
            self._goals[goal_id] = replace(goal, is_active=False)
            return True

    # ─── RISK METRICS ───────────────────────────────────────────

    def list_risk_metrics(self, start: Optional[date] = None,
                          end: Optional[date] = None) -> List[RiskMetrics]:
        with self._lock:
            rows = [r for r in self._risk.values() if _in_range(r.date, start, end)]
        rows.sort(key=lambda r: r.date)
        return rows

    def get_risk_metrics(self, day: date) -> Optional[RiskMetrics]:
        with self._lock:
            return self._risk.get(day)

    def upsert_risk_metrics(self, day: date, **values: Any) -> RiskMetrics:
        with self._lock:
            existing = self._risk.get(day)
            if existing:
                record = self._merge(existing, values, protected=("id", "date"))
            else:
                record = RiskMetrics(id=self._next_id("risk"), date=day, **values)
            self._risk[day] = record
            return record
