"""Tests for goal progress and deadline labels."""

from datetime import date

import pytest

from src.tracker.goal_analytics import compute_goal_progress
from src.tracker.tracker_models import GoalTracking

DAY = date(2024, 3, 15)


class TestGoalProgress:

    def _goal(self, current="250", target="1000", deadline=None):
        return GoalTracking(id=3, title="Monthly profit", target_value=target,
                            current_value=current, unit="$", category="profit",
                            deadline=deadline)

    def test_percent_and_no_deadline(self):
        progress = compute_goal_progress(self._goal(), DAY)
        assert progress.progress_pct == 25.0
        assert progress.achieved is False
        assert progress.deadline_status == "No deadline"
        assert progress.days_left is None

    def test_clamped_at_100(self):
        progress = compute_goal_progress(self._goal(current="1500"), DAY)
        assert progress.progress_pct == 100.0
        assert progress.achieved is True

    def test_bad_numbers_fall_back(self):
        assert compute_goal_progress(self._goal(current="abc"), DAY).progress_pct == 0.0
        # Target 0 is treated as 1.
        assert compute_goal_progress(self._goal(current="0.5", target="0"), DAY).progress_pct == 50.0

    @pytest.mark.parametrize("deadline, status, days_left", [
        (date(2024, 3, 14), "Overdue", -1),
        (date(2024, 3, 15), "Due today", 0),
        (date(2024, 3, 16), "Due tomorrow", 1),
        (date(2024, 3, 25), "10 days left", 10),
    ])
    def test_deadline_status(self, deadline, status, days_left):
        progress = compute_goal_progress(self._goal(deadline=deadline), DAY)
        assert progress.deadline_status == status
        assert progress.days_left == days_left

    def test_through_store(self, store, goal_analytics, clock):
        goal = store.create_goal(title="Journal days", target_value="20", current_value="5",
                                 unit="days", category="discipline", deadline=date(2024, 3, 31))
        progress = goal_analytics.goal_progress(goal.id)
        assert progress.goal_id == goal.id
        assert progress.progress_pct == 25.0
        assert progress.days_left == 16
        assert goal_analytics.goal_progress(99) is None
