"""Local actions exposed to the realtime model."""

from __future__ import annotations

from collections.abc import Iterable

import pluggy
from loguru import logger

from realtalk.config import Settings
from realtalk.hookspecs import REALTALK_HOOK_NAMESPACE, RealtalkHookSpecs
from realtalk.tools.builtin import Navigator, RecordingNavigator, register_builtin_tools
from realtalk.tools.registry import ToolDescriptor, ToolRegistry


def build_tool_registry(
    settings: Settings,
    *,
    navigator: Navigator,
    plugins: Iterable[object] = (),
    load_entrypoints: bool = False,
) -> ToolRegistry:
    """Build the registry with built-in tools plus any tools contributed by plugins.

    A plugin that fails while registering is logged and skipped.
    """
    registry = ToolRegistry()
    register_builtin_tools(registry, navigator=navigator, pages=settings.pages)

    plugin_manager = pluggy.PluginManager(REALTALK_HOOK_NAMESPACE)
    plugin_manager.add_hookspecs(RealtalkHookSpecs)
    for plugin in plugins:
        plugin_manager.register(plugin)
    if load_entrypoints:
        plugin_manager.load_setuptools_entrypoints(REALTALK_HOOK_NAMESPACE)

    hook_kwargs = {"registry": registry, "settings": settings}
    for impl in plugin_manager.hook.register_tools.get_hookimpls():
        call_kwargs = {name: value for name, value in hook_kwargs.items() if name in impl.argnames}
        try:
            impl.function(**call_kwargs)
        except Exception:
            logger.opt(exception=True).warning("tool.plugin_failed plugin={}", impl.plugin_name)
    return registry


__all__ = [
    "Navigator",
    "RecordingNavigator",
    "ToolDescriptor",
    "ToolRegistry",
    "build_tool_registry",
    "register_builtin_tools",
]
