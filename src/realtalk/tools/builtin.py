"""Built-in local actions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, Field

from realtalk.errors import ToolExecutionError
from realtalk.tools.registry import ToolRegistry


class Navigator(Protocol):
    """Capability that switches the visible page of the host app."""

    def navigate(self, page: str) -> None: ...


@dataclass
class RecordingNavigator:
    """Navigator that only remembers where it was asked to go."""

    pages: list[str] = field(default_factory=list)

    def navigate(self, page: str) -> None:
        self.pages.append(page)


class NavigateInput(BaseModel):
    page: str = Field(..., description="Page path to navigate to")


def navigate_parameters(pages: Sequence[str]) -> dict[str, object]:
    return {
        "type": "object",
        "properties": {
            "page": {
                "type": "string",
                "enum": list(pages),
                "description": "Page path to navigate to",
            },
        },
        "required": ["page"],
    }


def register_builtin_tools(registry: ToolRegistry, *, navigator: Navigator, pages: Sequence[str]) -> None:
    """Register built-in tools into registry."""

    allowed = tuple(pages)

    @registry.register(
        name="navigate",
        description="Navigate to a specific page in the app",
        model=NavigateInput,
        parameters=navigate_parameters(allowed),
        continue_response=True,
    )
    def navigate(params: NavigateInput) -> None:
        if params.page not in allowed:
            raise ToolExecutionError(f"page not available: {params.page}")
        navigator.navigate(params.page)
        logger.info("tool.navigate page={}", params.page)
