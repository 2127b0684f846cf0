"""realtalk - reconcile realtime voice transcripts and dispatch model tool calls."""

from .config import Settings, load_settings
from .engine import EngineStep, ReconciliationEngine, TurnView
from .session import RealtimeSession
from .tools import ToolRegistry

__version__ = "0.1.0"

__all__ = [
    "EngineStep",
    "RealtimeSession",
    "ReconciliationEngine",
    "Settings",
    "ToolRegistry",
    "TurnView",
    "load_settings",
]
