"""
Habit Analytics Engine — streaks, completion rates, perfect days
=================================================================

Per-habit (reference date D):
  - completedToday      completed=true record exists for (habit, D)
  - currentStreak       consecutive completed days ending at D, walking back
  - monthlyCompletions  completed=true records inside D's month
  - completionRate      monthlyCompletions / days in D's month, percent

Across habits:
  - weekly progress     per-day share of habits completed
  - monthly stats       perfect days, overall rate, best 100% run

A habit takes part in a past day's aggregate when it was still on the
checklist that day (see ``Habit.counts_on``). All reads go through the
store; nothing here mutates it.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List

from src.tracker.tracker_models import DailyProgress, Habit, HabitWithStats, MonthlyStats
from src.tracker.tracker_store import TrackerStore
from src.utils.helpers import iter_days, month_bounds, round_half_up

logger = logging.getLogger("habit_analytics")


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


class HabitAnalytics:
    """Read-only habit statistics over a ``TrackerStore``."""

    def __init__(self, store: TrackerStore, streak_lookback_days: int = 365):
        self._store = store
        self._lookback = streak_lookback_days

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # PER-HABIT
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def current_streak(self, habit_id: int, day: date) -> int:
        """Consecutive completed days ending at ``day``; a missing record breaks it."""
        # Window never reaches back past date.min.
        lookback = min(self._lookback, day.toordinal())
        done = {
            c.date for c in self._store.get_habit_completions(
                habit_id, start=day - timedelta(days=lookback - 1), end=day)
            if c.completed
        }
        streak = 0
        check = day
        while streak < lookback and check in done:
            streak += 1
            if check == date.min:
                break
            check -= timedelta(days=1)
        return streak

    def habit_stats(self, habit: Habit, day: date) -> HabitWithStats:
        start, end = month_bounds(day.year, day.month)
        monthly = sum(
            1 for c in self._store.get_habit_completions(habit.id, start=start, end=end)
            if c.completed
        )
        today = self._store.get_habit_completion(habit.id, day)
        days_in_month = end.day
        return HabitWithStats(
            habit=habit,
            current_streak=self.current_streak(habit.id, day),
            completion_rate=_percent(monthly, days_in_month),
            completed_today=bool(today and today.completed),
            monthly_completions=monthly,
            total_days_this_month=days_in_month,
        )

    def habits_with_stats(self, day: date) -> List[HabitWithStats]:
        return [self.habit_stats(h, day) for h in self._store.list_habits()]

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ACROSS HABITS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def _day_counts(self, habits: List[Habit], day: date) -> tuple[int, int]:
        """(completed, possible) for one day."""
        completed = possible = 0
        for habit in habits:
            if not habit.counts_on(day):
                continue
            possible += 1
            record = self._store.get_habit_completion(habit.id, day)
            if record and record.completed:
                completed += 1
        return completed, possible

    def weekly_progress(self, start: date, end: date) -> List[DailyProgress]:
        """One ``DailyProgress`` per day in ``[start, end]``; empty if start > end."""
        habits = self._store.list_habits(include_inactive=True)
        progress = []
        for day in iter_days(start, end):
            completed, possible = self._day_counts(habits, day)
            progress.append(DailyProgress(date=day, completion_rate=_percent(completed, possible)))
        return progress

    def monthly_stats(self, year: int, month: int) -> MonthlyStats:
        """Month rollup over every habit that counted on each day.

        Habits deleted after the month still feed ``bestStreak`` and
        ``completionRate``, so those can be non-zero while ``totalHabits``
        (active habits now) is 0.
        """
        start, end = month_bounds(year, month)
        habits = self._store.list_habits(include_inactive=True)

        total_completions = total_possible = perfect_days = 0
        best_streak = run = 0
        for day in iter_days(start, end):
            completed, possible = self._day_counts(habits, day)
            total_completions += completed
            total_possible += possible
            if possible and completed == possible:
                perfect_days += 1
            # Same criterion as weekly progress: the day's rate is exactly 100.
            if _percent(completed, possible) == 100:
                run += 1
                best_streak = max(best_streak, run)
            else:
                run = 0

        stats = MonthlyStats(
            best_streak=best_streak,
            total_habits=sum(1 for h in habits if h.is_active),
            completion_rate=_percent(total_completions, total_possible),
            perfect_days=perfect_days,
        )
        logger.debug("monthly stats %d-%02d: %s", year, month, stats)
        return stats

