"""Process logging setup and the active-turn log context."""

from __future__ import annotations

import os
import sys
from contextvars import ContextVar
from typing import Any, Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "console"]

_FORMATS: dict[LogProfile, str] = {
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<6} | {name}:{function}:{line} | {extra[turn]} | {message}",
    "console": "[{extra[turn]}] {message}",
}
_active_profile: LogProfile | None = None
_turn_context: ContextVar[str | None] = ContextVar("turn", default=None)


def current_turn() -> str:
    """Key of the turn being reconciled, or '-' between turns."""
    return _turn_context.get() or "-"


def bind_turn(key: str | None) -> None:
    _turn_context.set(key)


def _attach_turn(record: loguru.Record) -> None:
    record["extra"]["turn"] = current_turn()


def _sink(profile: LogProfile) -> Any:
    if profile == "console":
        # Rich renders level and time itself; the loguru format only carries the turn.
        return RichHandler(console=get_console(), show_time=False, show_path=False, markup=False)
    return sys.stderr


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Route loguru output for this process. Repeated calls with the same profile do nothing.

    `level` falls back to REALTALK_LOG_LEVEL, then INFO.
    """
    global _active_profile
    if profile == _active_profile:
        return

    resolved = (level or os.getenv("REALTALK_LOG_LEVEL") or "INFO").upper()
    logger.remove()
    logger.configure(patcher=_attach_turn)
    logger.add(_sink(profile), level=resolved, format=_FORMATS[profile], backtrace=False, diagnose=False)
    _active_profile = profile
