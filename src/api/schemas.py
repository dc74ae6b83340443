"""Request body schemas. Field names are camelCase on the wire."""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Any, ClassVar, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, model_validator
from pydantic.alias_generators import to_camel

from src.utils.helpers import parse_day


def _iso_day(value: Any) -> Any:
    if isinstance(value, dt.date):
        return value
    return parse_day(value)


def _numeric_text(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("expected numeric text")
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _blank_to_none(value: Any) -> Any:
    value = _numeric_text(value)
    return None if value == "" else value


Day = Annotated[dt.date, BeforeValidator(_iso_day)]
NumericText = Annotated[str, BeforeValidator(_numeric_text), Field(min_length=1)]
OptionalNumericText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    # May be left out of a partial update, never sent as null.
    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        for name in self.not_null:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self

    def to_store(self, partial: bool = False) -> dict:
        """Snake_case field values; only the submitted ones when ``partial``."""
        return self.model_dump(exclude_unset=partial)

# ── Habits ───────────────────────────────────────────────────

class HabitCreate(_Schema):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(default="custom", min_length=1)


class HabitUpdate(_Schema):
    not_null: ClassVar[tuple[str, ...]] = ("name", "category")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)


class HabitCompletionUpsert(_Schema):
    habit_id: int
    date: Day
    completed: StrictBool = False


# ── Daily singletons ─────────────────────────────────────────

class EmotionalCheckInUpsert(_Schema):
    date: Day
    mood: Literal["excellent", "good", "neutral", "stressed", "angry"]


class JournalEntryUpsert(_Schema):
    date: Day
    content: str


class RiskMetricsUpsert(_Schema):
    date: Day
    account_balance: OptionalNumericText = None
    max_drawdown: OptionalNumericText = None
    daily_risk: OptionalNumericText = None
    position_size: OptionalNumericText = None
    risk_reward_ratio: OptionalNumericText = None


# ── Trades ───────────────────────────────────────────────────

class TradeCreate(_Schema):
    date: Day
    symbol: str = Field(min_length=1)
    side: Literal["long", "short"]
    entry_price: NumericText
    quantity: NumericText
    exit_price: OptionalNumericText = None
    pnl: OptionalNumericText = None
    tags: Optional[List[str]] = None
    emotional_state: Optional[str] = None
    setup: Optional[str] = None
    mistakes: Optional[List[str]] = None
    lessons: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class TradeUpdate(_Schema):
    not_null: ClassVar[tuple[str, ...]] = ("date", "symbol", "side", "entry_price", "quantity")

    date: Optional[Day] = None
    symbol: Optional[str] = Field(default=None, min_length=1)
    side: Optional[Literal["long", "short"]] = None
    entry_price: Optional[NumericText] = None
    quantity: Optional[NumericText] = None
    exit_price: OptionalNumericText = None
    pnl: OptionalNumericText = None
    tags: Optional[List[str]] = None
    emotional_state: Optional[str] = None
    setup: Optional[str] = None
    mistakes: Optional[List[str]] = None
    lessons: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


# ── Goals ────────────────────────────────────────────────────

class GoalCreate(_Schema):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    target_value: NumericText
    current_value: NumericText = "0"
    unit: str = Field(min_length=1)
    deadline: Optional[Day] = None
    category: str = Field(min_length=1)


class GoalUpdate(_Schema):
    not_null: ClassVar[tuple[str, ...]] = ("title", "target_value", "current_value", "unit", "category")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    target_value: Optional[NumericText] = None
    current_value: Optional[NumericText] = None
    unit: Optional[str] = Field(default=None, min_length=1)
    deadline: Optional[Day] = None
    category: Optional[str] = Field(default=None, min_length=1)
