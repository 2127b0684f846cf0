"""Registry of local actions the model may call."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from loguru import logger
from pydantic import BaseModel, ValidationError

from realtalk.errors import ToolArgumentError, ToolError, ToolExecutionError, UnknownToolError

ToolHandler: TypeAlias = Callable[[Any], object]


def _clip(text: str, width: int = 40) -> str:
    return text if len(text) <= width else f"{text[: width - 3]}..."


@dataclass(frozen=True)
class ToolDescriptor:
    """One local action: what the model is told about it and the handler that runs it."""

    name: str
    description: str
    model: type[BaseModel]
    handler: ToolHandler
    parameters: dict[str, Any] | None = None
    continue_response: bool = False
    source: str = "builtin"

    def schema(self) -> dict[str, Any]:
        parameters = self.parameters if self.parameters is not None else self.model.model_json_schema()
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": parameters,
        }


class ToolRegistry:
    """Registry for tools exposed to the realtime model."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(
        self,
        *,
        name: str,
        description: str,
        model: type[BaseModel],
        parameters: dict[str, Any] | None = None,
        continue_response: bool = False,
        source: str = "builtin",
    ) -> Callable[[ToolHandler], ToolHandler]:
        def decorator(handler: ToolHandler) -> ToolHandler:
            self.add(
                ToolDescriptor(
                    name=name,
                    description=description,
                    model=model,
                    handler=handler,
                    parameters=parameters,
                    continue_response=continue_response,
                    source=source,
                )
            )
            return handler

        return decorator

    def add(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            logger.warning("tool.replaced name={} source={}", descriptor.name, descriptor.source)
        self._tools[descriptor.name] = descriptor

    def has(self, name: str) -> bool:
        return name in self._tools

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def descriptors(self) -> list[ToolDescriptor]:
        return sorted(self._tools.values(), key=lambda item: item.name)

    def model_tools(self) -> list[dict[str, Any]]:
        return [descriptor.schema() for descriptor in self.descriptors()]

    def parse_arguments(self, descriptor: ToolDescriptor, arguments: str) -> BaseModel:
        try:
            return descriptor.model.model_validate_json(arguments.strip() or "{}")
        except ValidationError as exc:
            raise ToolArgumentError(f"invalid arguments for {descriptor.name}: {exc.errors()[0]['msg']}") from exc

    def execute(self, name: str, *, arguments: str, call_id: str = "-") -> object:
        """Parse arguments and run one tool handler.

        Raises:
            UnknownToolError: If no tool is registered under `name`
            ToolArgumentError: If `arguments` does not fit the tool input model
            ToolExecutionError: If the handler fails
        """
        descriptor = self.get(name)
        if descriptor is None:
            raise UnknownToolError(name)

        params = self.parse_arguments(descriptor, arguments)
        self._log_tool_call(name, params.model_dump(), call_id)

        start = time.monotonic()
        try:
            return descriptor.handler(params)
        except ToolError:
            logger.warning("tool.call.error name={} call_id={}", name, call_id)
            raise
        except Exception as exc:
            logger.exception("tool.call.error name={} call_id={}", name, call_id)
            raise ToolExecutionError(f"{name} failed: {exc!s}") from exc
        finally:
            duration = time.monotonic() - start
            logger.info("tool.call.end name={} duration={:.3f}ms", name, duration * 1000)

    @staticmethod
    def _log_tool_call(name: str, kwargs: dict[str, Any], call_id: str) -> None:
        params: list[str] = []
        for key, value in kwargs.items():
            try:
                rendered = json.dumps(value, ensure_ascii=False)
            except TypeError:
                rendered = repr(value)
            params.append(f"{key}={_clip(rendered)}")
        logger.info("tool.call.start name={} call_id={} {{ {} }}", name, call_id, ", ".join(params))
