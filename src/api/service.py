from __future__ import annotations

from datetime import date
from typing import Any, Optional

from src.api.schemas import (
    EmotionalCheckInUpsert,
    GoalCreate,
    GoalUpdate,
    HabitCompletionUpsert,
    HabitCreate,
    HabitUpdate,
    JournalEntryUpsert,
    RiskMetricsUpsert,
    TradeCreate,
    TradeUpdate,
)
from src.tracker.goal_analytics import GoalAnalytics
from src.tracker.habit_analytics import HabitAnalytics
from src.tracker.trading_analytics import TradingAnalytics
from src.tracker.tracker_store import MemoryTrackerStore, TrackerStore
from src.utils.config import get_settings
from src.utils.exceptions import NotFoundError, ValidationError
from src.utils.helpers import format_day, parse_day, week_bounds
from src.utils.logger import get_logger

logger = get_logger(__name__)


def _dump(record: Any) -> Optional[dict[str, Any]]:
    return record.to_dict() if record is not None else None


class TrackerService:
    """Façade the HTTP layer talks to: store CRUD plus the analytics engines."""

    _instance: Optional[TrackerService] = None

    def __init__(self, store: Optional[TrackerStore] = None) -> None:
        self._settings = get_settings()
        self._store = store or MemoryTrackerStore(seed_defaults=self._settings.seed_default_habits)
        self._habit_analytics = HabitAnalytics(
            self._store, streak_lookback_days=self._settings.streak_lookback_days
        )
        self._trading_analytics = TradingAnalytics(self._store)
        self._goal_analytics = GoalAnalytics(self._store)

    @classmethod
    def get_instance(cls) -> TrackerService:
        if cls._instance is None:
            cls._instance = TrackerService()
            logger.info("service_created")
        return cls._instance

    @classmethod
    def set_instance(cls, service: Optional[TrackerService]) -> None:
        cls._instance = service

    # ─── Argument parsing ───────────────────────────────────────

    @staticmethod
    def parse_day(value: Optional[str], message: str = "Invalid date") -> date:
        try:
            return parse_day(value or "")
        except ValueError:
            raise ValidationError(message) from None

    def parse_range(self, start: Optional[str], end: Optional[str],
                    required: bool = True) -> tuple[Optional[date], Optional[date]]:
        if required and (not start or not end):
            raise ValidationError("Start date and end date are required")
        start_day = self.parse_day(start, "Invalid start date") if start else None
        end_day = self.parse_day(end, "Invalid end date") if end else None
        if start_day and end_day:
            span = (end_day - start_day).days + 1
            if span > self._settings.max_range_days:
                raise ValidationError(
                    f"Date range too long (max {self._settings.max_range_days} days)"
                )
        return start_day, end_day

    # ─── Habits ─────────────────────────────────────────────────

    def list_habits(self) -> list[dict[str, Any]]:
        return [h.to_dict() for h in self._store.list_habits()]

    def get_habit(self, habit_id: int) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_habit(habit_id))

    def create_habit(self, payload: HabitCreate) -> dict[str, Any]:
        habit = self._store.create_habit(**payload.to_store())
        logger.info("habit_created", habit_id=habit.id, name=habit.name)
        return habit.to_dict()

    def update_habit(self, habit_id: int, payload: HabitUpdate) -> Optional[dict[str, Any]]:
        return _dump(self._store.update_habit(habit_id, **payload.to_store(partial=True)))

    def delete_habit(self, habit_id: int) -> bool:
        deleted = self._store.delete_habit(habit_id)
        if deleted:
            logger.info("habit_deactivated", habit_id=habit_id)
        return deleted

    def get_habit_completions(self, habit_id: int, start: Optional[str] = None,
                              end: Optional[str] = None) -> list[dict[str, Any]]:
        start_day, end_day = self.parse_range(start, end, required=False)
        completions = self._store.get_habit_completions(habit_id, start=start_day, end=end_day)
        return [c.to_dict() for c in sorted(completions, key=lambda c: c.date)]

    def upsert_habit_completion(self, payload: HabitCompletionUpsert) -> dict[str, Any]:
        if self._store.get_habit(payload.habit_id) is None:
            raise NotFoundError("Habit not found")
        record = self._store.upsert_habit_completion(payload.habit_id, payload.date, payload.completed)
        return record.to_dict()

    # ─── Check-ins, journal, risk ───────────────────────────────

    def get_emotional_checkin(self, day: str) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_emotional_checkin(self.parse_day(day)))

    def upsert_emotional_checkin(self, payload: EmotionalCheckInUpsert) -> dict[str, Any]:
        return self._store.upsert_emotional_checkin(payload.date, payload.mood).to_dict()

    def get_journal_entry(self, day: str) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_journal_entry(self.parse_day(day)))

    def upsert_journal_entry(self, payload: JournalEntryUpsert) -> dict[str, Any]:
        return self._store.upsert_journal_entry(payload.date, payload.content).to_dict()

    def list_risk_metrics(self, start: Optional[str] = None,
                          end: Optional[str] = None) -> list[dict[str, Any]]:
        start_day, end_day = self.parse_range(start, end, required=False)
        return [r.to_dict() for r in self._store.list_risk_metrics(start=start_day, end=end_day)]

    def get_risk_metrics(self, day: str) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_risk_metrics(self.parse_day(day)))

    def upsert_risk_metrics(self, payload: RiskMetricsUpsert) -> dict[str, Any]:
        values = payload.to_store()
        day = values.pop("date")
        return self._store.upsert_risk_metrics(day, **values).to_dict()

    # ─── Trades ─────────────────────────────────────────────────

    def list_trades(self, start: Optional[str] = None,
                    end: Optional[str] = None) -> list[dict[str, Any]]:
        start_day, end_day = self.parse_range(start, end, required=False)
        return [t.to_dict() for t in self._store.list_trades(start=start_day, end=end_day)]

    def get_trade(self, trade_id: int) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_trade(trade_id))

    def create_trade(self, payload: TradeCreate) -> dict[str, Any]:
        trade = self._store.create_trade(**payload.to_store())
        logger.info("trade_created", trade_id=trade.id, symbol=trade.symbol, pnl=trade.pnl)
        return trade.to_dict()

    def update_trade(self, trade_id: int, payload: TradeUpdate) -> Optional[dict[str, Any]]:
        return _dump(self._store.update_trade(trade_id, **payload.to_store(partial=True)))

    def delete_trade(self, trade_id: int) -> bool:
        deleted = self._store.delete_trade(trade_id)
        if deleted:
            logger.info("trade_deleted", trade_id=trade_id)
        return deleted

    # ─── Goals ──────────────────────────────────────────────────

    def list_goals(self) -> list[dict[str, Any]]:
        return [g.to_dict() for g in self._store.list_goals()]

    def get_goal(self, goal_id: int) -> Optional[dict[str, Any]]:
        return _dump(self._store.get_goal(goal_id))

    def create_goal(self, payload: GoalCreate) -> dict[str, Any]:
        goal = self._store.create_goal(**payload.to_store())
        logger.info("goal_created", goal_id=goal.id, title=goal.title)
        return goal.to_dict()

    def update_goal(self, goal_id: int, payload: GoalUpdate) -> Optional[dict[str, Any]]:
        return _dump(self._store.update_goal(goal_id, **payload.to_store(partial=True)))

    def delete_goal(self, goal_id: int) -> bool:
        return self._store.delete_goal(goal_id)

    def get_goal_progress(self, goal_id: int, day: Optional[str] = None) -> Optional[dict[str, Any]]:
        today = self.parse_day(day) if day else None
        return _dump(self._goal_analytics.goal_progress(goal_id, today))

    # ─── Analytics ──────────────────────────────────────────────

    def get_habits_with_stats(self, day: str) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._habit_analytics.habits_with_stats(self.parse_day(day))]

    def get_weekly_progress(self, start: Optional[str], end: Optional[str]) -> list[dict[str, Any]]:
        start_day, end_day = self.parse_range(start, end)
        return [p.to_dict() for p in self._habit_analytics.weekly_progress(start_day, end_day)]

    def get_monthly_stats(self, year: int, month: int) -> dict[str, Any]:
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            raise ValidationError("Invalid year or month")
        return self._habit_analytics.monthly_stats(year, month).to_dict()

    def get_trading_stats(self, start: Optional[str], end: Optional[str]) -> dict[str, Any]:
        start_day, end_day = self.parse_range(start, end)
        return self._trading_analytics.trading_stats(start_day, end_day).to_dict()

    def get_week(self, day: str) -> dict[str, Any]:
        start, end = week_bounds(self.parse_day(day))
        return {"startOfWeek": format_day(start), "endOfWeek": format_day(end)}
