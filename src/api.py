"""HTTP API for the calendar: month grid, navigation and memos.

One ``CalendarApp`` serves the process. It is created on first use, loads
the persisted memos and starts the reminder scheduler. The scheduler is
stopped when the application shuts down.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field, field_validator

from calendar_app import CalendarApp
from calendar_math import YearMonth
from memo import Memo
from notifier import ReminderDispatcher

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Calendar instance
# ---------------------------------------------------------------------------

_calendar: CalendarApp | None = None
_calendar_lock = threading.Lock()


def get_calendar() -> CalendarApp:
    """Return the process-wide calendar, creating and loading it on first call."""
    global _calendar
    with _calendar_lock:
        if _calendar is None:
            calendar = CalendarApp(dispatcher=ReminderDispatcher())
            calendar.load()
            calendar.dispatcher.start()
            _calendar = calendar
        return _calendar


def shutdown_calendar() -> None:
    """Stop the reminder scheduler and drop the process-wide calendar."""
    global _calendar
    with _calendar_lock:
        if _calendar is not None and _calendar.dispatcher is not None:
            _calendar.dispatcher.shutdown()
        _calendar = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    shutdown_calendar()


app = FastAPI(title="Calendar Memo API", lifespan=lifespan)


class StripApiPrefixMiddleware:
    """Serve ``/api/...`` paths the same as their unprefixed routes."""

    def __init__(self, inner_app):
        self.inner_app = inner_app

    async def __call__(self, scope, receive, send):
        if scope.get("type") == "http":
            path = scope.get("path") or ""
            if path == "/api":
                scope = dict(scope)
                scope["path"] = "/"
            elif path.startswith("/api/"):
                scope = dict(scope)
                scope["path"] = path[len("/api"):]
        await self.inner_app(scope, receive, send)


# Must be installed before routing.
app.add_middleware(StripApiPrefixMiddleware)


@app.middleware("http")
async def logging_middleware(request: Request, call_next) -> Response:
    start = time.monotonic()
    response = await call_next(request)
    duration_ms = round((time.monotonic() - start) * 1000, 1)

    extra = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": duration_ms,
    }
    logger.info("request %s %s %d %.1fms", extra["method"], extra["path"],
                extra["status_code"], duration_ms, extra=extra)
    return response


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class JumpRequest(BaseModel):
    year: int = Field(ge=dt.MINYEAR, le=dt.MAXYEAR)
    month: int = Field(ge=1, le=12)


class SelectRequest(BaseModel):
    date: dt.date


class MemoRequest(BaseModel):
    date: dt.date
    time: dt.time | None = None
    content: str

    @field_validator("time")
    @classmethod
    def _time_is_local(cls, value: dt.time | None) -> dt.time | None:
        if value is not None:
            if value.tzinfo is not None:
                raise ValueError("time must not carry a timezone")
            if value.microsecond:
                raise ValueError("time must be HH:MM or HH:MM:SS")
        return value

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be empty")
        return value


class CreateMemoRequest(MemoRequest):
    replace: bool = False


def _view(calendar: CalendarApp) -> dict:
    return {"calendar": calendar.month_view().to_dict()}


def _navigate(calendar: CalendarApp, move, *args) -> dict:
    with calendar.lock:
        try:
            move(*args)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return _view(calendar)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/_healthz")
@app.get("/healthz")
def healthz():
    return {"ok": True}


# ---------------------------------------------------------------------------
# Month grid and navigation
# ---------------------------------------------------------------------------

@app.get("/calendar")
def get_month(calendar: CalendarApp = Depends(get_calendar)):
    return _view(calendar)


@app.post("/calendar/previous")
def previous_month(calendar: CalendarApp = Depends(get_calendar)):
    return _navigate(calendar, calendar.navigation.go_to_previous_month)


@app.post("/calendar/next")
def next_month(calendar: CalendarApp = Depends(get_calendar)):
    return _navigate(calendar, calendar.navigation.go_to_next_month)


@app.post("/calendar/today")
def today(calendar: CalendarApp = Depends(get_calendar)):
    return _navigate(calendar, calendar.navigation.go_to_today)


@app.post("/calendar/jump")
def jump(body: JumpRequest, calendar: CalendarApp = Depends(get_calendar)):
    return _navigate(calendar, calendar.navigation.jump_to, YearMonth(body.year, body.month))


@app.post("/calendar/select")
def select(body: SelectRequest, calendar: CalendarApp = Depends(get_calendar)):
    return _navigate(calendar, calendar.navigation.select_date, body.date)


# ---------------------------------------------------------------------------
# Memos
# ---------------------------------------------------------------------------

@app.get("/memos")
def list_memos(date: dt.date, calendar: CalendarApp = Depends(get_calendar)):
    return {"memos": [m.to_dict() for m in calendar.memos_on(date)]}


@app.post("/memos")
def create_memo(body: CreateMemoRequest, calendar: CalendarApp = Depends(get_calendar)):
    try:
        memo = Memo.from_dict(body.model_dump())
        result = calendar.add_memo(memo.date, memo.content, memo.time, replace=body.replace)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    reminder = None
    if result.reminder is not None:
        reminder = {"fire_at": result.reminder.fire_at.isoformat(), "job_id": result.job_id}
    logger.info("create_memo date=%s reminder=%s", body.date, reminder is not None)
    return {"memo": result.memo.to_dict(), "reminder": reminder}


@app.delete("/memos")
def delete_memo(body: MemoRequest, calendar: CalendarApp = Depends(get_calendar)):
    memo = Memo.from_dict(body.model_dump())
    if not calendar.remove_memo(memo):
        raise HTTPException(status_code=404, detail="Memo not found")
    logger.info("delete_memo date=%s", body.date)
    return {"ok": True}


@app.delete("/memos/{date}")
def delete_memos_on(date: dt.date, calendar: CalendarApp = Depends(get_calendar)):
    count = calendar.remove_memos_on(date)
    return {"ok": True, "removed": count}
