# run.py
# Entry point. Config and wiring only, no logic lives here.
#
# Set GEMINI_API_KEY (environment or .env) and run `terminal-agent`.
# Any OpenAI-compatible endpoint works via AGENT_BASE_URL / AGENT_MODEL.

import logging
import sys

from rich.logging import RichHandler

from terminal_agent import display
from terminal_agent.config import AgentConfig, ConfigError
from terminal_agent.conversation import Conversation
from terminal_agent.harness import SYSTEM_PROMPT, AgentLoop
from terminal_agent.oracle import OracleClient

EXIT_COMMAND = "exit"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=display.console, show_path=False)],
    )


def session(loop: AgentLoop, read_query=display.prompt_query) -> None:
    """Read queries until "exit" or end of input, running the loop for each."""
    while True:
        try:
            query = read_query()
        except (EOFError, KeyboardInterrupt):
            break

        query = query.strip()
        if query.lower() == EXIT_COMMAND:
            break
        if not query:
            continue

        loop.run(Conversation.seed(SYSTEM_PROMPT, query))

    display.goodbye()


def main() -> None:
    try:
        config = AgentConfig.from_env()
    except ConfigError as exc:
        display.error(str(exc))
        sys.exit(1)

    configure_logging(config.log_level)
    display.banner(config.model)

    loop = AgentLoop(OracleClient(config), max_steps=config.max_steps)
    session(loop)


if __name__ == "__main__":
    main()
