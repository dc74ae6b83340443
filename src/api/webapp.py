from __future__ import annotations

import json
import time
from typing import Any, Optional, Type, TypeVar

import pydantic
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

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
from src.api.service import TrackerService
from src.utils.exceptions import NotFoundError, TrackerError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Trading Discipline Tracker", version="1.0")

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def get_service() -> TrackerService:
    return TrackerService.get_instance()


async def parse_body(request: Request, schema: Type[SchemaT], message: str) -> SchemaT:
    """Validate a JSON body against ``schema``; any failure is a 400 with ``message``."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(message) from None
    if not isinstance(body, dict):
        raise ValidationError(message)
    try:
        return schema.model_validate(body)
    except pydantic.ValidationError as e:
        logger.info("request_rejected", path=request.url.path, errors=e.error_count())
        raise ValidationError(message) from None


# ─── Error handling ───────────────────────────────────────────

@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"message": "Invalid request parameters"}, status_code=400)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request_failed", method=request.method, path=request.url.path, exc_info=exc)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response


@app.get("/api/health")
async def health() -> dict[str, Any]:
    return {"status": "ok"}


# ─── Habits ───────────────────────────────────────────────────

@app.get("/api/habits")
async def list_habits() -> list[dict[str, Any]]:
    return get_service().list_habits()


@app.get("/api/habits/{habit_id}")
async def get_habit(habit_id: int) -> dict[str, Any]:
    habit = get_service().get_habit(habit_id)
    if habit is None:
        raise NotFoundError("Habit not found")
    return habit


@app.post("/api/habits", status_code=201)
async def create_habit(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, HabitCreate, "Invalid habit data")
    return get_service().create_habit(payload)


@app.put("/api/habits/{habit_id}")
async def update_habit(request: Request, habit_id: int) -> dict[str, Any]:
    payload = await parse_body(request, HabitUpdate, "Invalid habit data")
    habit = get_service().update_habit(habit_id, payload)
    if habit is None:
        raise NotFoundError("Habit not found")
    return habit


@app.delete("/api/habits/{habit_id}", status_code=204)
async def delete_habit(habit_id: int) -> Response:
    if not get_service().delete_habit(habit_id):
        raise NotFoundError("Habit not found")
    return Response(status_code=204)


@app.get("/api/habit-completions")
async def list_habit_completions(habitId: int, startDate: Optional[str] = None,
                                 endDate: Optional[str] = None) -> list[dict[str, Any]]:
    return get_service().get_habit_completions(habitId, startDate, endDate)


@app.post("/api/habit-completions")
async def upsert_habit_completion(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, HabitCompletionUpsert, "Invalid completion data")
    return get_service().upsert_habit_completion(payload)


# ─── Emotional check-ins & journal ────────────────────────────

@app.get("/api/emotional-checkin/{day}")
async def get_emotional_checkin(day: str) -> Optional[dict[str, Any]]:
    return get_service().get_emotional_checkin(day)


@app.post("/api/emotional-checkin")
async def upsert_emotional_checkin(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, EmotionalCheckInUpsert, "Invalid check-in data")
    return get_service().upsert_emotional_checkin(payload)


@app.get("/api/journal/{day}")
async def get_journal_entry(day: str) -> Optional[dict[str, Any]]:
    return get_service().get_journal_entry(day)


@app.post("/api/journal")
async def upsert_journal_entry(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, JournalEntryUpsert, "Invalid journal entry data")
    return get_service().upsert_journal_entry(payload)


# ─── Habit analytics ──────────────────────────────────────────

@app.get("/api/habits-with-stats/{day}")
async def habits_with_stats(day: str) -> list[dict[str, Any]]:
    return get_service().get_habits_with_stats(day)


@app.get("/api/weekly-progress")
async def weekly_progress(startDate: Optional[str] = None,
                          endDate: Optional[str] = None) -> list[dict[str, Any]]:
    return get_service().get_weekly_progress(startDate, endDate)


@app.get("/api/monthly-stats/{year}/{month}")
async def monthly_stats(year: int, month: int) -> dict[str, Any]:
    return get_service().get_monthly_stats(year, month)


@app.get("/api/week/{day}")
async def week(day: str) -> dict[str, Any]:
    return get_service().get_week(day)


# ─── Trades ───────────────────────────────────────────────────

@app.get("/api/trades")
async def list_trades(startDate: Optional[str] = None,
                      endDate: Optional[str] = None) -> list[dict[str, Any]]:
    return get_service().list_trades(startDate, endDate)


@app.get("/api/trades/{trade_id}")
async def get_trade(trade_id: int) -> dict[str, Any]:
    trade = get_service().get_trade(trade_id)
    if trade is None:
        raise NotFoundError("Trade not found")
    return trade


@app.post("/api/trades", status_code=201)
async def create_trade(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, TradeCreate, "Invalid trade data")
    return get_service().create_trade(payload)


@app.put("/api/trades/{trade_id}")
async def update_trade(request: Request, trade_id: int) -> dict[str, Any]:
    payload = await parse_body(request, TradeUpdate, "Invalid trade data")
    trade = get_service().update_trade(trade_id, payload)
    if trade is None:
        raise NotFoundError("Trade not found")
    return trade


@app.delete("/api/trades/{trade_id}", status_code=204)
async def delete_trade(trade_id: int) -> Response:
    if not get_service().delete_trade(trade_id):
        raise NotFoundError("Trade not found")
    return Response(status_code=204)


@app.get("/api/trading-stats")
async def trading_stats(startDate: Optional[str] = None,
                        endDate: Optional[str] = None) -> dict[str, Any]:
    return get_service().get_trading_stats(startDate, endDate)


# ─── Goals ────────────────────────────────────────────────────

@app.get("/api/goals")
async def list_goals() -> list[dict[str, Any]]:
    return get_service().list_goals()


@app.get("/api/goals/{goal_id}")
async def get_goal(goal_id: int) -> dict[str, Any]:
    goal = get_service().get_goal(goal_id)
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


@app.get("/api/goals/{goal_id}/progress")
async def goal_progress(goal_id: int, date: Optional[str] = None) -> dict[str, Any]:
    progress = get_service().get_goal_progress(goal_id, date)
    if progress is None:
        raise NotFoundError("Goal not found")
    return progress


@app.post("/api/goals", status_code=201)
async def create_goal(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, GoalCreate, "Invalid goal data")
    return get_service().create_goal(payload)


@app.put("/api/goals/{goal_id}")
async def update_goal(request: Request, goal_id: int) -> dict[str, Any]:
    payload = await parse_body(request, GoalUpdate, "Invalid goal data")
    goal = get_service().update_goal(goal_id, payload)
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


@app.delete("/api/goals/{goal_id}", status_code=204)
async def delete_goal(goal_id: int) -> Response:
    if not get_service().delete_goal(goal_id):
        raise NotFoundError("Goal not found")
    return Response(status_code=204)


# ─── Risk metrics ─────────────────────────────────────────────

@app.get("/api/risk-metrics")
async def list_risk_metrics(startDate: Optional[str] = None,
                            endDate: Optional[str] = None) -> list[dict[str, Any]]:
    return get_service().list_risk_metrics(startDate, endDate)


@app.get("/api/risk-metrics/{day}")
async def get_risk_metrics(day: str) -> Optional[dict[str, Any]]:
    return get_service().get_risk_metrics(day)


@app.post("/api/risk-metrics")
async def upsert_risk_metrics(request: Request) -> dict[str, Any]:
    payload = await parse_body(request, RiskMetricsUpsert, "Invalid risk metrics data")
    return get_service().upsert_risk_metrics(payload)
