"""
Trading Analytics Engine — win rate, P&L, profit factor, emotions
==================================================================

Computed over trade reviews whose date falls in an inclusive range:

  - totalTrades      every trade in range
  - winRate          winners / trades with a parseable P&L, percent
  - totalPnL         sum of parseable P&L
  - avgWin/avgLoss   mean winner, mean |loser|
  - profitFactor     gross wins / |gross losses|, capped at PROFIT_FACTOR_CAP
  - emotionalStates  label -> count, over every trade in range

Trades whose P&L is missing or not a number still count toward
totalTrades and emotionalStates. Zero P&L is neither a win nor a loss.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import List

from src.tracker.tracker_models import TradeReview, TradingStats
from src.tracker.tracker_store import TrackerStore
from src.utils.helpers import parse_number, round_half_up

logger = logging.getLogger("trading_analytics")

# Reported when there are winners but no losers.
PROFIT_FACTOR_CAP = 999.0


def compute_trading_stats(trades: List[TradeReview]) -> TradingStats:
    if not trades:
        return TradingStats()

    pnls = [p for p in (parse_number(t.pnl) for t in trades) if p is not None]
    wins = [p for p in pnls if p > 0]
    losses = [abs(p) for p in pnls if p < 0]

    gross_win = sum(wins)
    gross_loss = sum(losses)
    if gross_loss > 0:
        profit_factor = gross_win / gross_loss
    elif gross_win > 0:
        profit_factor = PROFIT_FACTOR_CAP
    else:
        profit_factor = 0.0

    emotions = Counter(t.emotional_state for t in trades if t.emotional_state)

    return TradingStats(
        total_trades=len(trades),
        win_rate=round_half_up(len(wins) / len(pnls) * 100) if pnls else 0,
        total_pnl=round_half_up(sum(pnls), 2),
        avg_win=round_half_up(gross_win / len(wins), 2) if wins else 0.0,
        avg_loss=round_half_up(gross_loss / len(losses), 2) if losses else 0.0,
        profit_factor=round_half_up(profit_factor, 2),
        emotional_states=dict(emotions),
    )


class TradingAnalytics:
    """Read-only trade statistics over a ``TrackerStore``."""

    def __init__(self, store: TrackerStore):
        self._store = store

    def trading_stats(self, start: date, end: date) -> TradingStats:
        trades = self._store.list_trades(start=start, end=end)
        stats = compute_trading_stats(trades)
        logger.debug("trading stats %s..%s: %d trades", start, end, stats.total_trades)
        return stats

