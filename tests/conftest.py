from __future__ import annotations

from itertools import count

import pytest

from realtalk.config import Settings
from realtalk.engine import ReconciliationEngine
from realtalk.tools import RecordingNavigator, ToolRegistry, build_tool_registry


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def tools(settings: Settings, navigator: RecordingNavigator) -> ToolRegistry:
    return build_tool_registry(settings, navigator=navigator)


@pytest.fixture
def engine(tools: ToolRegistry) -> ReconciliationEngine:
    ids = count(1)
    return ReconciliationEngine(tools, id_factory=lambda: f"turn-{next(ids)}")
