# conversation.py
# Per-query conversation state. A Conversation is an immutable value:
# append() returns a new Conversation and never mutates the receiver.

from dataclasses import dataclass

from terminal_agent.models import Decision, ModelTurn, ObservationTurn, Turn, UserTurn

ACKNOWLEDGEMENT = Decision(
    step="think",
    tool=None,
    input=None,
    content=(
        "Okay, I understand the instructions. I am a helpful assistant that can "
        "write files. I will follow the THINK, ACTION, OBSERVE, OUTPUT loop. "
        "I am ready for the user's query."
    ),
)


@dataclass(frozen=True)
class Conversation:
    """Ordered, append-only history of turns exchanged with the oracle."""

    turns: tuple[Turn, ...] = ()

    @classmethod
    def seed(cls, instructions: str, query: str) -> "Conversation":
        """Fresh history for one query: instructions, acknowledgement, query."""
        return cls(
            (
                UserTurn(text=instructions),
                ModelTurn(decision=ACKNOWLEDGEMENT),
                UserTurn(text=query),
            )
        )

    def append(self, turn: Turn) -> "Conversation":
        return Conversation(self.turns + (turn,))

    def with_decision(self, decision: Decision) -> "Conversation":
        return self.append(ModelTurn(decision=decision))

    def with_observation(self, output: str) -> "Conversation":
        return self.append(ObservationTurn(output=output))

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self):
        return iter(self.turns)
