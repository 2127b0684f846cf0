"""Dual-stream transcript reconciliation and tool dispatch."""

from .core import EngineStep, ReconciliationEngine
from .correlator import TurnCorrelator, new_turn_key
from .dispatcher import RecentIds, ToolDispatcher
from .gate import CompletionGate, GateState
from .ledger import ChangeKind, LedgerChange, TranscriptLedger, Turn, TurnView

__all__ = [
    "ChangeKind",
    "CompletionGate",
    "EngineStep",
    "GateState",
    "LedgerChange",
    "RecentIds",
    "ReconciliationEngine",
    "ToolDispatcher",
    "TranscriptLedger",
    "Turn",
    "TurnCorrelator",
    "TurnView",
    "new_turn_key",
]
