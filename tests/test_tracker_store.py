"""Tests for the in-memory tracker store."""

from datetime import date

import pytest

from src.tracker.tracker_store import DEFAULT_HABITS, MemoryTrackerStore


class TestHabits:

    def test_create_assigns_increasing_ids_and_defaults(self, store):
        a = store.create_habit(name="Journal", description=None)
        b = store.create_habit(name="Stretch", category="Health")
        assert (a.id, b.id) == (1, 2)
        assert a.category == "custom"
        assert a.is_active is True
        assert b.category == "Health"

    def test_create_ignores_is_active_override(self, store):
        habit = store.create_habit(name="Journal", is_active=False)
        assert habit.is_active is True

    def test_update_merges_partial_fields(self, store):
        habit = store.create_habit(name="Journal", description="evening")
        updated = store.update_habit(habit.id, name="Morning journal")
        assert updated.name == "Morning journal"
        assert updated.description == "evening"
        assert store.get_habit(habit.id) == updated

    def test_update_unknown_returns_none(self, store):
        assert store.update_habit(99, name="x") is None

    def test_update_cannot_touch_protected_fields(self, store):
        habit = store.create_habit(name="Journal")
        with pytest.raises(TypeError):
            store.update_habit(habit.id, id=42)

    def test_soft_delete_hides_from_active_listing(self, store, clock):
        keep = store.create_habit(name="Keep")
        drop = store.create_habit(name="Drop")
        assert store.delete_habit(drop.id) is True

        assert [h.id for h in store.list_habits()] == [keep.id]
        assert len(store.list_habits(include_inactive=True)) == 2
        removed = store.get_habit(drop.id)
        assert removed.is_active is False
        assert removed.deactivated_on == clock.today

    def test_soft_delete_keeps_completions(self, store):
        habit = store.create_habit(name="Drop")
        store.upsert_habit_completion(habit.id, date(2024, 3, 1), True)
        store.delete_habit(habit.id)
        assert len(store.get_habit_completions(habit.id)) == 1

    def test_delete_unknown_returns_false(self, store):
        assert store.delete_habit(7) is False

    def test_seed_defaults(self):
        seeded = MemoryTrackerStore(seed_defaults=True)
        names = [h.name for h in seeded.list_habits()]
        assert names == [h["name"] for h in DEFAULT_HABITS]
        assert seeded.create_habit(name="Fifth").id == len(DEFAULT_HABITS) + 1


class TestCompletions:

    def test_upsert_is_idempotent(self, store):
        habit = store.create_habit(name="Journal")
        first = store.upsert_habit_completion(habit.id, date(2024, 3, 15), True)
        second = store.upsert_habit_completion(habit.id, date(2024, 3, 15), True)
        assert first == second
        assert len(store.get_habit_completions(habit.id)) == 1

    def test_upsert_overwrites_in_place(self, store):
        habit = store.create_habit(name="Journal")
        first = store.upsert_habit_completion(habit.id, date(2024, 3, 15), True)
        second = store.upsert_habit_completion(habit.id, date(2024, 3, 15), False)
        assert second.id == first.id
        assert second.completed is False
        assert store.get_habit_completion(habit.id, date(2024, 3, 15)).completed is False

    def test_range_query_is_inclusive(self, store):
        habit = store.create_habit(name="Journal")
        for day in (1, 5, 10, 11):
            store.upsert_habit_completion(habit.id, date(2024, 3, day), True)
        got = store.get_habit_completions(habit.id, start=date(2024, 3, 5), end=date(2024, 3, 10))
        assert sorted(c.date.day for c in got) == [5, 10]

    def test_completions_are_per_habit(self, store):
        a = store.create_habit(name="A")
        b = store.create_habit(name="B")
        store.upsert_habit_completion(a.id, date(2024, 3, 1), True)
        assert store.get_habit_completions(b.id) == []
        assert store.get_habit_completion(b.id, date(2024, 3, 1)) is None


class TestDailySingletons:

    def test_checkin_upsert_keeps_id(self, store):
        first = store.upsert_emotional_checkin(date(2024, 3, 15), "good")
        second = store.upsert_emotional_checkin(date(2024, 3, 15), "stressed")
        assert second.id == first.id
        assert store.get_emotional_checkin(date(2024, 3, 15)).mood == "stressed"

    def test_journal_upsert_separate_days(self, store):
        a = store.upsert_journal_entry(date(2024, 3, 14), "patient")
        b = store.upsert_journal_entry(date(2024, 3, 15), "chased a breakout")
        assert (a.id, b.id) == (1, 2)
        assert store.get_journal_entry(date(2024, 3, 13)) is None

    def test_risk_metrics_upsert_replaces_values(self, store):
        first = store.upsert_risk_metrics(date(2024, 3, 15), account_balance="10000", daily_risk="1")
        second = store.upsert_risk_metrics(date(2024, 3, 15), account_balance="10250", daily_risk=None)
        assert second.id == first.id
        assert second.account_balance == "10250"
        assert second.daily_risk is None

    def test_risk_metrics_listing_sorted_by_date(self, store):
        store.upsert_risk_metrics(date(2024, 3, 15), account_balance="1")
        store.upsert_risk_metrics(date(2024, 3, 1), account_balance="2")
        store.upsert_risk_metrics(date(2024, 2, 1), account_balance="3")
        days = [r.date for r in store.list_risk_metrics(start=date(2024, 3, 1))]
        assert days == [date(2024, 3, 1), date(2024, 3, 15)]


class TestTradesAndGoals:

    def _trade(self, store, day, pnl="10"):
        return store.create_trade(date=day, symbol="ES", side="long",
                                  entry_price="5000", quantity="1", pnl=pnl)

    def test_trade_hard_delete(self, store):
        trade = self._trade(store, date(2024, 3, 15))
        assert store.delete_trade(trade.id) is True
        assert store.get_trade(trade.id) is None
        assert store.delete_trade(trade.id) is False

    def test_trade_ids_never_reused(self, store):
        first = self._trade(store, date(2024, 3, 15))
        store.delete_trade(first.id)
        second = self._trade(store, date(2024, 3, 15))
        assert second.id == first.id + 1

    def test_trade_listing_newest_first_and_filtered(self, store):
        a = self._trade(store, date(2024, 3, 1))
        b = self._trade(store, date(2024, 3, 10))
        c = self._trade(store, date(2024, 3, 10))
        self._trade(store, date(2024, 4, 1))
        got = store.list_trades(start=date(2024, 3, 1), end=date(2024, 3, 31))
        assert [t.id for t in got] == [c.id, b.id, a.id]

    def test_trade_update_partial(self, store):
        trade = self._trade(store, date(2024, 3, 15))
        updated = store.update_trade(trade.id, pnl="-25", lessons="Sized too big")
        assert updated.pnl == "-25"
        assert updated.symbol == "ES"
        assert store.update_trade(999, pnl="1") is None

    def test_goal_soft_delete(self, store):
        goal = store.create_goal(title="Profit", target_value="1000", unit="$", category="profit")
        assert goal.current_value == "0"
        assert store.delete_goal(goal.id) is True
        assert store.list_goals() == []
        assert store.get_goal(goal.id).is_active is False
        assert store.delete_goal(123) is False

    def test_goal_update(self, store):
        goal = store.create_goal(title="Profit", target_value="1000", unit="$", category="profit")
        assert store.update_goal(goal.id, current_value="250").current_value == "250"
        assert store.update_goal(goal.id + 1, current_value="1") is None
