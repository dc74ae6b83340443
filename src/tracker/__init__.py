"""
Trading Discipline Tracker — records and analytics
===================================================

  tracker_models.py     — dataclass records + derived result types
  tracker_store.py      — storage contract + in-memory implementation
  habit_analytics.py    — streaks, completion rates, weekly/monthly rollups
  trading_analytics.py  — win rate, P&L, profit factor, emotional states
  goal_analytics.py     — goal progress and deadline status
"""

from src.tracker.tracker_models import (
    # Records
    Habit,
    HabitCompletion,
    EmotionalCheckIn,
    JournalEntry,
    TradeReview,
    GoalTracking,
    RiskMetrics,
    # Derived
    HabitWithStats,
    DailyProgress,
    MonthlyStats,
    TradingStats,
    GoalProgress,
)

from src.tracker.tracker_store import TrackerStore, MemoryTrackerStore
from src.tracker.habit_analytics import HabitAnalytics
from src.tracker.trading_analytics import TradingAnalytics, PROFIT_FACTOR_CAP
from src.tracker.goal_analytics import GoalAnalytics

__all__ = [
    # Models
    "Habit", "HabitCompletion", "EmotionalCheckIn", "JournalEntry",
    "TradeReview", "GoalTracking", "RiskMetrics",
    "HabitWithStats", "DailyProgress", "MonthlyStats", "TradingStats", "GoalProgress",
    # Engines
    "TrackerStore", "MemoryTrackerStore",
    "HabitAnalytics", "TradingAnalytics", "GoalAnalytics", "PROFIT_FACTOR_CAP",
]
