# oracle.py
# Oracle client: one chat-completions request per Decision.
#
# The client sends the whole conversation, asks for a single JSON object back,
# and either returns a validated Decision or raises an OracleFailure. It never
# retries; the agent loop decides what a failure means.

import json
import logging
import re

import openai
from openai import OpenAI
from pydantic import ValidationError

from terminal_agent.config import AgentConfig
from terminal_agent.conversation import Conversation
from terminal_agent.models import Decision, Role

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class OracleFailure(Exception):
    """Base class for any oracle outcome that did not yield a Decision."""


class TransportFailure(OracleFailure):
    """Raised when the oracle is unreachable or answers with a non-success status."""


class ContentBlocked(OracleFailure):
    """Raised when the oracle refuses the request on content-safety grounds."""


class MalformedDecision(OracleFailure):
    """Raised when the oracle's reply cannot be read as a Decision."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ROLE_MAP = {Role.USER: "user", Role.MODEL: "assistant"}


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the oracle added one."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text


def parse_decision(raw: str) -> Decision:
    """
    Decode oracle text into a Decision.
    Raises MalformedDecision on any parse or contract failure.
    """
    cleaned = strip_code_fence(raw)
    try:
        data = json.loads(cleaned, strict=False)
    except json.JSONDecodeError as exc:
        raise MalformedDecision(f"Response is not valid JSON: {exc}\nPayload: {cleaned}") from exc

    if not isinstance(data, dict):
        raise MalformedDecision(f"Expected a JSON object, got {type(data).__name__}.")

    try:
        return Decision.model_validate(data)
    except ValidationError as exc:
        raise MalformedDecision(f"Response does not match the decision format: {exc}") from exc


def to_messages(conversation: Conversation) -> list[dict]:
    return [{"role": _ROLE_MAP[turn.role], "content": turn.payload} for turn in conversation]


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class OracleClient:
    """
    Thin wrapper over an OpenAI-compatible chat endpoint.

    Example:
        oracle = OracleClient(AgentConfig.from_env())
        decision = oracle.request(conversation)
    """

    def __init__(self, config: AgentConfig) -> None:
        self._model = config.model
        kwargs = {"base_url": config.base_url, "api_key": config.api_key, "max_retries": 0}
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout
        self._client = OpenAI(**kwargs)

    def request(self, conversation: Conversation) -> Decision:
        logger.debug("Requesting decision from %s with %d turns", self._model, len(conversation))
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=to_messages(conversation),
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as exc:
            raise TransportFailure(f"API Error: {exc.status_code} - {exc.message}") from exc
        except openai.APIConnectionError as exc:
            raise TransportFailure(f"Oracle unreachable: {exc}") from exc
        except openai.APIResponseValidationError as exc:
            raise MalformedDecision(f"Unreadable response body: {exc.message}") from exc
        except openai.APIError as exc:
            raise TransportFailure(f"API Error: {exc.message}") from exc

        if not response.choices:
            raise MalformedDecision("Invalid response structure from API.")

        choice = response.choices[0]
        message = choice.message
        if choice.finish_reason == "content_filter" or getattr(message, "refusal", None):
            reason = getattr(message, "refusal", None) or choice.finish_reason
            raise ContentBlocked(f"API blocked the prompt. Reason: {reason}")

        if not message.content:
            raise MalformedDecision("Invalid response structure from API.")

        decision = parse_decision(message.content)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Oracle decision: %s", decision.serialize())
        return decision
