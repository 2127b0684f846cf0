"""Application-level exception types for realtalk."""

from __future__ import annotations


class RealtalkError(Exception):
    """Base exception for realtalk."""


class GatewayError(RealtalkError):
    """Base exception for outbound delivery failures."""


class ChannelNotReadyError(GatewayError):
    """Raised when an event is sent before the channel is open or after it closed."""

    def __init__(self, event_type: str) -> None:
        super().__init__(f"channel not ready, dropped outbound event: {event_type}")
        self.event_type = event_type


class TransportSendError(GatewayError):
    """Raised when the transport accepted the channel as open but failed to write."""

    def __init__(self, event_type: str, cause: Exception) -> None:
        super().__init__(f"transport failed to send {event_type}: {cause}")
        self.event_type = event_type


class ToolError(RealtalkError):
    """Base exception for local tool execution."""


class UnknownToolError(ToolError):
    """Raised when the model calls a tool that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown tool: {name}")
        self.name = name


class ToolArgumentError(ToolError):
    """Raised when tool call arguments cannot be parsed into the tool input model."""


class ToolExecutionError(ToolError):
    """Raised by a tool handler when its side effect cannot be applied."""
