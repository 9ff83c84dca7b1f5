"""Run the activity loop headless behind its local control API."""

from __future__ import annotations

import logging
import webbrowser
from typing import Optional

import uvicorn

from .config import AutoPauseSettings, LoopSettings, ScheduleSettings
from .webapp import create_app

logger = logging.getLogger(__name__)


def control_url(host: str, port: int) -> str:
    return f"http://{host}:{port}/docs"


def run_headless(
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    schedule_settings: Optional[ScheduleSettings] = None,
    auto_pause_settings: Optional[AutoPauseSettings] = None,
    loop_settings: Optional[LoopSettings] = None,
    dry_run: bool = False,
    open_browser: bool = False,
    log_level: str = "info",
) -> None:
    """Serve the control API; the loop starts and stops with the server."""
    app = create_app(
        schedule_settings=schedule_settings,
        auto_pause_settings=auto_pause_settings,
        loop_settings=loop_settings,
        dry_run=dry_run,
    )
    url = control_url(host, port)

    @app.on_event("startup")
    async def _announce() -> None:
        logger.info("Auto-pause controls available at %s", url)
        if open_browser and not webbrowser.open(url):
            logger.warning("No browser available to open %s", url)

    uvicorn.run(app, host=host, port=port, log_level=log_level)
