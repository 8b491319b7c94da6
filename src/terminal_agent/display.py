# display.py
# All terminal output for the agent.
#
# This module owns presentation entirely. harness.py and run.py never format
# strings for the terminal; they call named functions here.
#
# Colour language:
#   cyan    : session events and the query prompt
#   yellow  : THINK
#   blue    : ACTION
#   magenta : OBSERVE
#   green   : OUTPUT
#   red     : ERROR

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _line(category: str, color: str, body: str) -> None:
    text = Text()
    text.append(f"[{category.upper()}] ", style=f"bold {color}")
    text.append(body, style=color)
    console.print(text)


def _render_input(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def banner(model: str) -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Terminal Agent[/bold cyan]\n"
            "[dim]THINK → ACTION → OBSERVE → OUTPUT[/dim]\n\n"
            f"[dim]Model :[/dim] [white]{escape(model)}[/white]",
            border_style="cyan",
            padding=(1, 4),
        )
    )


def prompt_query() -> str:
    console.print()
    return console.input('[cyan]Enter your query (or type "exit" to close): [/cyan]')


def processing() -> None:
    console.print(Rule("[cyan]Agent is processing…[/cyan]", style="cyan"))


def goodbye() -> None:
    console.print("[dim]Session closed.[/dim]")


# ---------------------------------------------------------------------------
# Loop steps
# ---------------------------------------------------------------------------


def think(content: str | None) -> None:
    _line("think", "yellow", content or "")


def action(tool: str | None, tool_input: Any) -> None:
    _line("action", "blue", f"Tool: {tool}, Input: {_render_input(tool_input)}")


def observe(observation: str) -> None:
    _line("observe", "magenta", f"Result: {observation}")


def output(content: str | None) -> None:
    console.print()
    console.print(
        Panel(
            Text(content or "", style="white"),
            title=_label("OUTPUT", "green"),
            border_style="green",
            padding=(1, 2),
        )
    )


def error(message: str) -> None:
    _line("error", "red", message)
