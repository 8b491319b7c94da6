# models.py
# Data contracts for the terminal agent loop.
# No business logic lives here: pure schema and validation.

import json
import math
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class StepKind(str, Enum):
    THINK = "think"
    ACTION = "action"
    OUTPUT = "output"


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------


class Decision(BaseModel):
    """One structured response from the oracle."""

    model_config = ConfigDict(extra="allow", frozen=True)

    step: StepKind = Field(..., description="Next step: think, action or output.")
    tool: Any = Field(default=None, description="Registered tool name for action steps; any JSON value is kept.")
    input: Any = Field(default=None, description="Tool-specific payload.")
    content: str | None = Field(default=None, description="Thought or final answer text.")

    def serialize(self) -> str:
        """Render the Decision as the oracle sent it (unset fields omitted)."""
        return self.model_dump_json(exclude_unset=True)


# ---------------------------------------------------------------------------
# Turns
# ---------------------------------------------------------------------------


class UserTurn(BaseModel):
    """Free text from the user side: the instruction prompt or a query."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    text: str

    @property
    def role(self) -> Role:
        return Role.USER

    @property
    def payload(self) -> str:
        return self.text


class ModelTurn(BaseModel):
    """A Decision previously returned by the oracle."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["model"] = "model"
    decision: Decision

    @property
    def role(self) -> Role:
        return Role.MODEL

    @property
    def payload(self) -> str:
        return self.decision.serialize()


class ObservationTurn(BaseModel):
    """A tool result fed back to the oracle as a user-role turn."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["observe"] = "observe"
    output: str

    @property
    def role(self) -> Role:
        return Role.USER

    @property
    def payload(self) -> str:
        return json.dumps({"step": "observe", "output": self.output})


Turn = Annotated[Union[UserTurn, ModelTurn, ObservationTurn], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Tool inputs
# ---------------------------------------------------------------------------


class AddTwoNumbersInput(BaseModel):
    """Two finite operands, decoded from "x,y" or [x, y]."""

    model_config = ConfigDict(frozen=True)

    tool: Literal["addTwoNumbers"] = "addTwoNumbers"
    x: float
    y: float

    @model_validator(mode="before")
    @classmethod
    def _split_pair(cls, data: Any) -> Any:
        if isinstance(data, str):
            parts = [part.strip() for part in data.split(",")]
        elif isinstance(data, (list, tuple)):
            parts = list(data)
        else:
            return data
        if len(parts) != 2:
            raise ValueError("Invalid number input.")
        return {"x": parts[0], "y": parts[1]}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _reject_blank_and_bool(cls, value: Any) -> Any:
        if isinstance(value, bool) or value is None or value == "":
            raise ValueError("Invalid number input.")
        return value

    @field_validator("x", "y")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("Invalid number input.")
        return value


class WriteFileInput(BaseModel):
    """Target path and the full text to write there."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tool: Literal["writeFile"] = "writeFile"
    file_path: str = Field(..., alias="filePath", min_length=1)
    file_content: str = Field(..., alias="fileContent")

