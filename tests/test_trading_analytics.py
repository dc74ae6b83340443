"""Tests for trade statistics."""

from datetime import date

from src.tracker.trading_analytics import PROFIT_FACTOR_CAP, compute_trading_stats
from src.tracker.tracker_models import TradeReview

DAY = date(2024, 3, 15)


def make_trade(pnl=None, emotional_state=None, day=DAY, trade_id=1):
    return TradeReview(id=trade_id, date=day, symbol="NQ", side="long",
                       entry_price="18000", quantity="1", pnl=pnl,
                       emotional_state=emotional_state)


class TestTradingStats:

    def test_empty(self):
        assert compute_trading_stats([]).to_dict() == {
            "totalTrades": 0, "winRate": 0, "totalPnL": 0.0, "avgWin": 0.0,
            "avgLoss": 0.0, "profitFactor": 0.0, "emotionalStates": {},
        }

    def test_one_win_one_loss(self):
        stats = compute_trading_stats([make_trade("100"), make_trade("-50")])
        assert stats.total_trades == 2
        assert stats.win_rate == 50
        assert stats.total_pnl == 50.00
        assert stats.avg_win == 100.00
        assert stats.avg_loss == 50.00
        assert stats.profit_factor == 2.00

    def test_unparseable_pnl_excluded_from_pnl_metrics(self):
        trades = [
            make_trade("120.5", "calm"),
            make_trade(None, "fearful"),
            make_trade("", "fearful"),
            make_trade("n/a", "greedy"),
            make_trade("-40", "calm"),
        ]
        stats = compute_trading_stats(trades)
        assert stats.total_trades == 5
        assert stats.win_rate == 50
        assert stats.total_pnl == 80.5
        assert stats.emotional_states == {"calm": 2, "fearful": 2, "greedy": 1}

    def test_no_parseable_pnl(self):
        stats = compute_trading_stats([make_trade(None, "calm"), make_trade("abc")])
        assert stats.total_trades == 2
        assert stats.win_rate == 0
        assert stats.total_pnl == 0.0
        assert stats.profit_factor == 0.0
        assert stats.emotional_states == {"calm": 1}

    def test_all_wins_uses_cap(self):
        stats = compute_trading_stats([make_trade("10"), make_trade("30")])
        assert stats.profit_factor == PROFIT_FACTOR_CAP == 999
        assert stats.avg_win == 20.0
        assert stats.avg_loss == 0.0
        assert stats.win_rate == 100

    def test_breakeven_trade_is_neither_win_nor_loss(self):
        stats = compute_trading_stats([make_trade("0"), make_trade("25"), make_trade("-25")])
        assert stats.win_rate == 33
        assert stats.profit_factor == 1.0
        assert stats.total_pnl == 0.0

    def test_only_breakeven(self):
        stats = compute_trading_stats([make_trade("0")])
        assert stats.profit_factor == 0.0
        assert stats.win_rate == 0

    def test_rounding_to_cents(self):
        stats = compute_trading_stats([
            make_trade("10.25"), make_trade("0.75"), make_trade("-3"),
        ])
        assert stats.avg_win == 5.5
        assert stats.total_pnl == 8.0
        assert stats.profit_factor == 3.67

    def test_numeric_pnl_accepted(self):
        trade = make_trade()
        trade.pnl = 42
        assert compute_trading_stats([trade]).total_pnl == 42.0


class TestTradingAnalytics:

    def _add(self, store, day, pnl):
        return store.create_trade(date=day, symbol="ES", side="short",
                                  entry_price="5000", quantity="2", pnl=pnl)

    def test_range_is_inclusive(self, store, trading_analytics):
        self._add(store, date(2024, 3, 11), "100")
        self._add(store, date(2024, 3, 17), "-50")
        self._add(store, date(2024, 3, 18), "-500")
        self._add(store, date(2024, 3, 10), "-500")
        stats = trading_analytics.trading_stats(date(2024, 3, 11), date(2024, 3, 17))
        assert stats.total_trades == 2
        assert stats.profit_factor == 2.0

    def test_deleted_trade_drops_out(self, store, trading_analytics):
        keep = self._add(store, DAY, "100")
        drop = self._add(store, DAY, "-100")
        store.delete_trade(drop.id)
        stats = trading_analytics.trading_stats(DAY, DAY)
        assert stats.total_trades == 1
        assert stats.win_rate == 100
        assert keep.id == 1
