# harness.py
# Agent loop.
#
# The loop is the kernel. The oracle is a passive responder; this module
# owns all control flow, tool dispatch and state transitions.
#
# Control flow, per query:
#   AWAIT_DECISION → oracle request → record decision
#   → THINK (show thought) | ACTION (dispatch, observe) | OUTPUT (done)
#   → AWAIT_DECISION … until DONE or FAILED
#
# All terminal output is delegated to display.py, no formatting here.

import logging
from dataclasses import dataclass
from enum import Enum

from terminal_agent import display
from terminal_agent.conversation import Conversation
from terminal_agent.models import Decision, StepKind
from terminal_agent.oracle import OracleClient, OracleFailure
from terminal_agent.tools import TOOLS, ToolRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# System Prompt
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = """\
You are a helpful assistant designed to solve user queries, including writing code and files to the local system.
You operate in a loop with the following steps: THINK, ACTION, OBSERVE, and OUTPUT.

1.  **START**: The user provides a query.
2.  **THINK**: You break down the problem and create a plan. For coding tasks, think about the file structure (e.g., which files to create, like index.html, styles.css). You must think at least once. Your thoughts should be clear and explain your reasoning for the next step.
3.  **ACTION**: If a tool is needed, you call an ACTION with the tool name and the required input. To create or write to a file, use the 'writeFile' tool.
4.  **OBSERVE**: After an action, you will receive an observation. This is the output from the tool (e.g., "File written successfully.").
5.  **OUTPUT**: Based on your thoughts and observations, you provide the final answer to the user. This is usually done after all files have been created.

**Rules:**
- You must always respond in a single, valid JSON object.
- Always start with a "think" step.
- Only call tools that are available.
- For the 'writeFile' tool, the 'input' field must be a JSON object with "filePath" and "fileContent" keys.
- The loop continues until you have enough information or have completed all actions to use the "output" step.

**Available Tools:**
- `addTwoNumbers(x, y)`: Adds two numbers together. Input should be a comma-separated string of two numbers (e.g., "10,20").
- `writeFile(input)`: Writes content to a local file. The input must be a JSON object: { "filePath": "path/to/file.ext", "fileContent": "content to write" }.

**Output Format (Strict JSON):**
{
  "step": "think" | "action" | "output",
  "tool": "addTwoNumbers" | "writeFile" | null,
  "input": string | object,
  "content": string
}\
"""


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


class LoopState(str, Enum):
    AWAIT_DECISION = "await_decision"
    THINK = "think"
    ACTION = "action"
    OUTPUT = "output"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({LoopState.DONE, LoopState.FAILED})


@dataclass(frozen=True)
class LoopResult:
    """Outcome of one query: how the loop ended and what it produced."""

    state: LoopState
    conversation: Conversation
    answer: str | None = None
    requests: int = 0


# ---------------------------------------------------------------------------
# Agent loop
# ---------------------------------------------------------------------------


class AgentLoop:
    """
    Drives one query from seeded conversation to a final answer.

    The oracle and tool registry are injected so the loop can run against
    any OpenAI-compatible endpoint or a test double.

    Example:
        loop = AgentLoop(OracleClient(config))
        result = loop.run(Conversation.seed(SYSTEM_PROMPT, "Add 10 and 20"))
    """

    def __init__(
        self,
        oracle: OracleClient,
        tools: ToolRegistry = TOOLS,
        max_steps: int | None = None,
    ) -> None:
        self._oracle = oracle
        self._tools = tools
        self._max_steps = max_steps

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _act(self, conversation: Conversation, decision: Decision) -> Conversation:
        display.action(decision.tool, decision.input)
        observation = self._tools.dispatch(decision.tool, decision.input)
        display.observe(observation)
        return conversation.with_observation(observation)

    def apply(self, conversation: Conversation, decision: Decision) -> tuple[Conversation, LoopState]:
        """
        Fold one Decision into the conversation.

        The Decision is always recorded first so the oracle sees its own
        prior output on the next request. Returns the updated conversation
        and the state to move to.
        """
        conversation = conversation.with_decision(decision)

        if decision.step is StepKind.THINK:
            display.think(decision.content)
            return conversation, LoopState.AWAIT_DECISION

        if decision.step is StepKind.ACTION:
            return self._act(conversation, decision), LoopState.AWAIT_DECISION

        display.output(decision.content)
        return conversation, LoopState.DONE

    def step(self, conversation: Conversation) -> tuple[Conversation, LoopState]:
        """Single iteration: one oracle request and its transition."""
        try:
            decision = self._oracle.request(conversation)
        except OracleFailure as exc:
            logger.warning("Oracle request failed: %s", exc)
            display.error(f"Error calling oracle or parsing response: {exc}")
            return conversation, LoopState.FAILED

        logger.debug("%s -> %s", LoopState.AWAIT_DECISION.value, LoopState(decision.step.value).value)
        return self.apply(conversation, decision)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self, conversation: Conversation) -> LoopResult:
        """
        Iterate until the oracle emits an output step or a request fails.

        No bound applies unless max_steps was given; then reaching it ends
        the query as FAILED without another request.
        """
        display.processing()
        state = LoopState.AWAIT_DECISION
        requests = 0

        while state not in TERMINAL_STATES:
            if self._max_steps is not None and requests >= self._max_steps:
                display.error(f"Stopped after {requests} steps without a final output.")
                state = LoopState.FAILED
                break

            conversation, state = self.step(conversation)
            requests += 1

        answer = None
        if state is LoopState.DONE:
            answer = conversation.turns[-1].decision.content

        return LoopResult(
            state=state,
            conversation=conversation,
            answer=answer,
            requests=requests,
        )
