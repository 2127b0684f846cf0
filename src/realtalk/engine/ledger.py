"""Ordered conversation history built from both transcript streams."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from loguru import logger


class ChangeKind(Enum):
    OPENED = "opened"
    UPDATED = "updated"
    FINALIZED = "finalized"
    SEALED = "sealed"


@dataclass(frozen=True)
class TurnView:
    """Read-only snapshot of one turn for presentation."""

    id: str
    user_text: str | None = None
    agent_text: str | None = None


@dataclass(frozen=True)
class LedgerChange:
    kind: ChangeKind
    turn: TurnView


@dataclass
class Turn:
    """One user utterance and agent response exchange.

    `key` is the local correlation key and never changes. `id` is the public
    identifier, re-keyed to the upstream output item id once the agent message
    is final.
    """

    key: str
    id: str
    user_text: str | None = None
    agent_text: str | None = None
    sealed: bool = False

    def view(self) -> TurnView:
        return TurnView(id=self.id, user_text=self.user_text, agent_text=self.agent_text)


class TranscriptLedger:
    """Turns in the order they were opened. Nothing is ever removed."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []
        self._index: dict[str, Turn] = {}

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[TurnView]:
        return iter(self.snapshot())

    def get(self, key: str) -> TurnView | None:
        turn = self._index.get(key)
        return turn.view() if turn is not None else None

    def find(self, public_id: str) -> TurnView | None:
        for turn in self._turns:
            if turn.id == public_id:
                return turn.view()
        return None

    def snapshot(self) -> list[TurnView]:
        return [turn.view() for turn in self._turns]

    def newest_first(self) -> list[TurnView]:
        return [turn.view() for turn in reversed(self._turns)]

    def append_user_delta(self, key: str, fragment: str) -> LedgerChange | None:
        if not fragment:
            return None
        turn = self._index.get(key)
        if turn is None:
            return self._insert(Turn(key=key, id=key, user_text=fragment))
        if self._rejects(turn, "user_delta"):
            return None
        turn.user_text = (turn.user_text or "") + fragment
        return LedgerChange(ChangeKind.UPDATED, turn.view())

    def append_agent_delta(self, key: str, fragment: str) -> LedgerChange | None:
        if not fragment:
            return None
        turn = self._index.get(key)
        if turn is None:
            return self._insert(Turn(key=key, id=key, agent_text=fragment))
        if self._rejects(turn, "agent_delta"):
            return None
        turn.agent_text = (turn.agent_text or "") + fragment
        return LedgerChange(ChangeKind.UPDATED, turn.view())

    def finalize_user_text(self, key: str, final_transcript: str) -> LedgerChange | None:
        """Replace the accumulated user text with the authoritative transcript.

        A turn that never received a user or agent delta is left alone: there
        is nothing on screen to correct.
        """
        turn = self._index.get(key)
        if turn is None or self._rejects(turn, "user_final") or not final_transcript:
            return None
        turn.user_text = final_transcript
        return LedgerChange(ChangeKind.FINALIZED, turn.view())

    def finalize_agent_message(
        self, key: str, output_item_id: str, final_transcript: str | None
    ) -> LedgerChange | None:
        """Replace the agent text and adopt the output item id as the public id.

        Without a transcript the turn keeps its delta text and its local id.
        """
        turn = self._index.get(key)
        if turn is None or self._rejects(turn, "agent_final") or not final_transcript:
            return None
        turn.id = output_item_id
        turn.agent_text = final_transcript
        return LedgerChange(ChangeKind.FINALIZED, turn.view())

    def seal(self, key: str) -> LedgerChange | None:
        turn = self._index.get(key)
        if turn is None or turn.sealed:
            return None
        turn.sealed = True
        return LedgerChange(ChangeKind.SEALED, turn.view())

    def _insert(self, turn: Turn) -> LedgerChange:
        self._turns.append(turn)
        self._index[turn.key] = turn
        logger.debug("ledger.turn.insert key={} size={}", turn.key, len(self._turns))
        return LedgerChange(ChangeKind.OPENED, turn.view())

    @staticmethod
    def _rejects(turn: Turn, operation: str) -> bool:
        if turn.sealed:
            logger.warning("ledger.turn.sealed key={} op={}", turn.key, operation)
        return turn.sealed
