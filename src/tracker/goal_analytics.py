"""Goal progress: percent toward target plus a deadline label."""

from __future__ import annotations

from datetime import date
from typing import Optional

from src.tracker.tracker_models import GoalProgress, GoalTracking
from src.tracker.tracker_store import TrackerStore
from src.utils.helpers import parse_number, round_half_up


def compute_goal_progress(goal: GoalTracking, today: date) -> GoalProgress:
    # Unparseable current counts as 0; unparseable or zero target as 1.
    current = parse_number(goal.current_value) or 0.0
    target = parse_number(goal.target_value) or 1.0
    pct = min(current / target * 100, 100.0)

    days_left: Optional[int] = None
    if goal.deadline is None:
        status = "No deadline"
    else:
        days_left = (goal.deadline - today).days
        if days_left < 0:
            status = "Overdue"
        elif days_left == 0:
            status = "Due today"
        elif days_left == 1:
            status = "Due tomorrow"
        else:
            status = f"{days_left} days left"

    return GoalProgress(
        goal_id=goal.id,
        progress_pct=round_half_up(pct, 2),
        achieved=pct >= 100,
        deadline_status=status,
        days_left=days_left,
    )


class GoalAnalytics:
    def __init__(self, store: TrackerStore):
        self._store = store

    def goal_progress(self, goal_id: int, today: Optional[date] = None) -> Optional[GoalProgress]:
        goal = self._store.get_goal(goal_id)
        if goal is None:
            return None
        return compute_goal_progress(goal, today or self._store.today())
