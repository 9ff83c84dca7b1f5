"""FastAPI application exposing a local control surface for headless sessions."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .activity import ActivityLoop
from .config import AutoPauseSettings, LoopSettings, ScheduleSettings
from .console import LogDisplay
from .pointer import PointerNudger
from .runner import ActivityRunner, build_loop

logger = logging.getLogger(__name__)


class DurationPayload(BaseModel):
    minutes: float

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    schedule_settings: Optional[ScheduleSettings] = None,
    auto_pause_settings: Optional[AutoPauseSettings] = None,
    loop_settings: Optional[LoopSettings] = None,
    dry_run: bool = False,
    nudger: Optional[PointerNudger] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    loop = build_loop(
        LogDisplay(),
        schedule_settings=schedule_settings,
        auto_pause_settings=auto_pause_settings,
        loop_settings=loop_settings,
        dry_run=dry_run,
        nudger=nudger,
        clock=clock,
    )
    runner = ActivityRunner(loop)

    app = FastAPI(title="Keep Active", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.activity_loop = loop
    app.state.activity_runner = runner

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        runner.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        runner.stop()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return _status_payload(request.app.state.activity_loop, runner.is_running(), clock())

    @app.post("/api/auto-pause/toggle")
    def toggle(request: Request) -> Dict[str, Any]:
        activity_loop: ActivityLoop = request.app.state.activity_loop
        now = clock()
        activity_loop.controller.toggle_auto_pause(now)
        activity_loop.request_refresh()
        return _status_payload(activity_loop, runner.is_running(), now)

    @app.post("/api/auto-pause/force-resume")
    def force_resume(request: Request) -> Dict[str, Any]:
        activity_loop: ActivityLoop = request.app.state.activity_loop
        now = clock()
        activity_loop.controller.force_resume_now(now)
        activity_loop.request_refresh()
        return _status_payload(activity_loop, runner.is_running(), now)

    @app.post("/api/auto-pause/reset")
    def reset(request: Request) -> Dict[str, Any]:
        activity_loop: ActivityLoop = request.app.state.activity_loop
        activity_loop.controller.reset()
        activity_loop.request_refresh()
        return _status_payload(activity_loop, runner.is_running(), clock())

    @app.put("/api/auto-pause/duration")
    def set_duration(payload: DurationPayload, request: Request) -> Dict[str, Any]:
        if payload.minutes <= 0:
            raise HTTPException(status_code=400, detail="minutes must be positive")
        activity_loop: ActivityLoop = request.app.state.activity_loop
        now = clock()
        if activity_loop.controller.set_configured_duration(
            timedelta(minutes=payload.minutes), now
        ):
            activity_loop.request_refresh()
        return _status_payload(activity_loop, runner.is_running(), now)

    return app


def _status_payload(loop: ActivityLoop, running: bool, now: datetime) -> Dict[str, Any]:
    state = loop.controller.snapshot()
    decision = loop.evaluator.evaluate(now, state)
    remaining = loop.controller.remaining(now)
    duration = state.configured_duration
    return {
        "running": running,
        "failure": str(loop.failure) if loop.failure is not None else None,
        "decision": {
            "kind": decision.kind.value,
            "reason": decision.reason,
            "paused": decision.is_paused,
        },
        "auto_pause": {
            "duration_minutes": duration.total_seconds() / 60.0 if duration else None,
            "armed": state.is_armed,
            "deadline": state.deadline.isoformat() if state.deadline else None,
            "remaining_seconds": remaining.total_seconds() if remaining is not None else None,
        },
    }
