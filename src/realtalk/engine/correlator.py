"""Turn correlation without a shared upstream key."""

from __future__ import annotations

import uuid
from collections.abc import Callable

from loguru import logger

from realtalk.logging_utils import bind_turn


def new_turn_key() -> str:
    return uuid.uuid4().hex


class TurnCorrelator:
    """Holds the single active turn key shared by both upstream models.

    Neither the response model nor the transcription model exposes an id that
    the other one knows about, so the key is generated locally when the first
    event of a turn arrives and dropped when the completion gate retires it.
    """

    def __init__(self, id_factory: Callable[[], str] = new_turn_key) -> None:
        self._id_factory = id_factory
        self._active: str | None = None

    @property
    def active(self) -> str | None:
        return self._active

    def ensure_open(self) -> tuple[str, bool]:
        """Return the active key, opening a turn first when none is open.

        Returns:
            The active key and whether this call opened it
        """
        if self._active is not None:
            return self._active, False
        self._active = self._id_factory()
        bind_turn(self._active)
        logger.debug("engine.turn.open key={}", self._active)
        return self._active, True

    def retire(self) -> str | None:
        key, self._active = self._active, None
        bind_turn(None)
        if key is not None:
            logger.debug("engine.turn.retire key={}", key)
        return key
