"""Pluggy hook namespace and tool provider hook specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from realtalk.config import Settings
    from realtalk.tools.registry import ToolRegistry

REALTALK_HOOK_NAMESPACE = "realtalk"
hookspec = pluggy.HookspecMarker(REALTALK_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(REALTALK_HOOK_NAMESPACE)


class RealtalkHookSpecs:
    """Hook contract for realtalk extensions."""

    @hookspec
    def register_tools(self, registry: ToolRegistry, settings: Settings) -> None:
        """Register extra local actions the model may call."""
