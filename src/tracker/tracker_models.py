"""
Tracker Data Models
===================

Records kept by the tracker store:

  Habit / HabitCompletion   — daily discipline checklist
  EmotionalCheckIn          — one mood per day
  JournalEntry              — one free-text entry per day
  TradeReview               — any number of reviewed trades per day
  GoalTracking              — long-running targets
  RiskMetrics               — one risk snapshot per day

Derived records produced by the analytics engines:

  HabitWithStats, DailyProgress, MonthlyStats, TradingStats, GoalProgress

All models are dataclasses. Dates are ``datetime.date`` internally;
``to_dict()`` renders the camelCase JSON shape with ISO ``yyyy-mm-dd``
date strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional

from src.utils.helpers import format_day


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _render(value: Any) -> Any:
    if isinstance(value, date):
        return format_day(value)
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


class _Record:
    """Mixin: camelCase dict rendering for dataclass records."""

    def to_dict(self) -> dict:
        return {_camel(f.name): _render(getattr(self, f.name)) for f in fields(self)}


# ── Habits ───────────────────────────────────────────────────

@dataclass
class Habit(_Record):
    id: int
    name: str
    description: Optional[str] = None
    category: str = "custom"
    is_active: bool = True
    deactivated_on: Optional[date] = None

    def counts_on(self, day: date) -> bool:
        """Whether the habit was part of the checklist on ``day``."""
        if self.is_active:
            return True
        return self.deactivated_on is not None and day < self.deactivated_on


@dataclass
class HabitCompletion(_Record):
    id: int
    habit_id: int
    date: date
    completed: bool = False


# ── Daily singletons ─────────────────────────────────────────

@dataclass
class EmotionalCheckIn(_Record):
    id: int
    date: date
    mood: str


@dataclass
class JournalEntry(_Record):
    id: int
    date: date
    content: str


@dataclass
class RiskMetrics(_Record):
    id: int
    date: date
    account_balance: Optional[str] = None
    max_drawdown: Optional[str] = None
    daily_risk: Optional[str] = None
    position_size: Optional[str] = None
    risk_reward_ratio: Optional[str] = None


# ── Trades & goals ───────────────────────────────────────────

@dataclass
class TradeReview(_Record):
    id: int
    date: date
    symbol: str
    side: str                       # "long" | "short"
    entry_price: str
    quantity: str
    exit_price: Optional[str] = None
    pnl: Optional[str] = None       # numeric text; may be absent or unparseable
    tags: Optional[List[str]] = None
    emotional_state: Optional[str] = None
    setup: Optional[str] = None
    mistakes: Optional[List[str]] = None
    lessons: Optional[str] = None
    rating: Optional[int] = None    # 1..5


@dataclass
class GoalTracking(_Record):
    id: int
    title: str
    target_value: str
    unit: str
    category: str
    current_value: str = "0"
    description: Optional[str] = None
    deadline: Optional[date] = None
    is_active: bool = True


# ── Derived ──────────────────────────────────────────────────

@dataclass
class HabitWithStats:
    habit: Habit
    current_streak: int = 0
    completion_rate: int = 0
    completed_today: bool = False
    monthly_completions: int = 0
    total_days_this_month: int = 0

    def to_dict(self) -> dict:
        d = self.habit.to_dict()
        d.update({
            "currentStreak": self.current_streak,
            "completionRate": self.completion_rate,
            "completedToday": self.completed_today,
            "monthlyCompletions": self.monthly_completions,
            "totalDaysThisMonth": self.total_days_this_month,
        })
        return d


@dataclass
class DailyProgress(_Record):
    date: date
    completion_rate: int = 0


@dataclass
class MonthlyStats(_Record):
    best_streak: int = 0
    total_habits: int = 0
    completion_rate: int = 0
    perfect_days: int = 0


@dataclass
class TradingStats:
    total_trades: int = 0
    win_rate: int = 0
    total_pnl: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    emotional_states: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalTrades": self.total_trades,
            "winRate": self.win_rate,
            "totalPnL": self.total_pnl,
            "avgWin": self.avg_win,
            "avgLoss": self.avg_loss,
            "profitFactor": self.profit_factor,
            "emotionalStates": dict(self.emotional_states),
        }


@dataclass
class GoalProgress(_Record):
    goal_id: int
    progress_pct: float = 0.0
    achieved: bool = False
    deadline_status: str = "No deadline"
    days_left: Optional[int] = None
