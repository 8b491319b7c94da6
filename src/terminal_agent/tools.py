# tools.py
# Tool registry: all callable implementations.
# The harness dispatches through TOOLS and never calls these functions directly.

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from terminal_agent.models import AddTwoNumbersInput, WriteFileInput


class InvalidToolInput(Exception):
    """Raised when an action payload does not match the tool's input shape."""


@dataclass(frozen=True)
class ToolDescriptor:
    """A named tool: its input model, executor, and the shape error it reports."""

    name: str
    input_model: type[BaseModel]
    execute: Callable[[Any], str]
    invalid_input_message: str = "Invalid input."

    def decode(self, payload: Any) -> BaseModel:
        """Validate a raw action payload into this tool's input model."""
        try:
            return self.input_model.model_validate(payload)
        except ValidationError as exc:
            raise InvalidToolInput(self.invalid_input_message) from exc


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def add_two_numbers(args: AddTwoNumbersInput) -> str:
    return _format_number(args.x + args.y)


def write_file(args: WriteFileInput) -> str:
    """
    Write fileContent to filePath, creating parent directories as needed.

    Any existing file is replaced. I/O failures are reported in the returned
    observation rather than raised.
    """
    path = args.file_path
    try:
        data = args.file_content.encode("utf-8")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        return f"Error writing file: {exc.strerror or exc}"
    except ValueError as exc:
        # embedded NUL in the path, or content that is not encodable
        return f"Error writing file: {exc}"
    return f"Successfully wrote {len(data)} bytes to {path}"


class ToolRegistry:
    """Maps tool names to descriptors and turns action payloads into observations."""

    def __init__(self, tools: list[ToolDescriptor] | None = None) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDescriptor) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered.")
        self._tools[tool.name] = tool

    def lookup(self, name: Any) -> ToolDescriptor | None:
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def dispatch(self, name: Any, payload: Any) -> str:
        """
        Resolve, validate and execute one action.

        Always returns an observation string; unknown tools, shape errors and
        tool failures are all reported as text for the oracle to act on.
        """
        tool = self.lookup(name)
        if tool is None:
            return f"Unknown tool: {name}"
        try:
            args = tool.decode(payload)
        except InvalidToolInput as exc:
            return f"Error executing tool: {exc}"
        return tool.execute(args)


def default_registry() -> ToolRegistry:
    return ToolRegistry(
        [
            ToolDescriptor(
                name="addTwoNumbers",
                input_model=AddTwoNumbersInput,
                execute=add_two_numbers,
                invalid_input_message="Invalid number input.",
            ),
            ToolDescriptor(
                name="writeFile",
                input_model=WriteFileInput,
                execute=write_file,
                invalid_input_message=(
                    "Invalid input for writeFile. "
                    "Expected an object with 'filePath' and 'fileContent'."
                ),
            ),
        ]
    )


TOOLS = default_registry()
