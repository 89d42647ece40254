from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

ChatRole = Literal["system", "user"]
CHAT_ROLES: tuple[ChatRole, ...] = ("system", "user")

DEFAULT_TEMPERATURE = 1.0
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


class ChatModel(Enum):
    """Remote model identifiers offered by the chat completions endpoint."""

    GPT_35_TURBO = ("gpt-3.5-turbo", "GPT-3.5-TURBO")
    GPT_4 = ("gpt-4", "GPT-4")
    GPT_4_TURBO = ("gpt-4-turbo", "GPT-4-TURBO")
    GPT_4O = ("gpt-4o", "GPT-4O")
    GPT_4O_MINI = ("gpt-4o-mini", "GPT-4O-Mini")
    O1_PREVIEW = ("o1-preview", "O1")
    O1_MINI = ("o1-mini", "O1-Mini")

    def __init__(self, identifier: str, label: str) -> None:
        self.identifier = identifier
        self.label = label

    @classmethod
    def default(cls) -> "ChatModel":
        return next(iter(cls))

    @classmethod
    def from_identifier(cls, identifier: str) -> "ChatModel":
        for model in cls:
            if model.identifier == identifier:
                return model
        raise ValueError(f"Unknown model identifier: {identifier!r}")

    @classmethod
    def selectable(cls) -> list["ChatModel"]:
        # o1 系はシステムロールを受け付けないため選択肢には出さない
        hidden = {cls.O1_PREVIEW, cls.O1_MINI}
        return [model for model in cls if model not in hidden]


def is_valid_temperature(value: float) -> bool:
    return MIN_TEMPERATURE <= value <= MAX_TEMPERATURE


@dataclass(frozen=True)
class Message:
    role: ChatRole
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class InputTurn:
    role: ChatRole = "user"
    label: str = ""
    content: str = ""
    # 以下は画面操作用のフラグで永続化しない
    delete: bool = field(default=False, compare=False)
    move_up: bool = field(default=False, compare=False)
    move_down: bool = field(default=False, compare=False)

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)

    def to_dict(self) -> dict:
        return {"role": self.role, "label": self.label, "content": self.content}

    @classmethod
    def from_dict(cls, payload: dict) -> "InputTurn":
        return cls(**_parse_turn_fields(payload))


@dataclass
class Template:
    role: ChatRole = "user"
    label: str = ""
    content: str = ""
    delete: bool = field(default=False, compare=False)

    @classmethod
    def from_turn(cls, turn: InputTurn) -> "Template":
        return cls(role=turn.role, label=turn.label, content=turn.content)

    def to_turn(self) -> InputTurn:
        return InputTurn(role=self.role, label=self.label, content=self.content)

    def to_dict(self) -> dict:
        return {"role": self.role, "label": self.label, "content": self.content}

    @classmethod
    def from_dict(cls, payload: dict) -> "Template":
        return cls(**_parse_turn_fields(payload))


@dataclass
class Settings:
    model: ChatModel = field(default_factory=ChatModel.default)
    temperature: float = DEFAULT_TEMPERATURE
    api_key: str = ""

    def __post_init__(self) -> None:
        if not is_valid_temperature(self.temperature):
            raise ValueError(
                f"temperature must be within [{MIN_TEMPERATURE}, {MAX_TEMPERATURE}], got {self.temperature}"
            )


@dataclass
class Session:
    """Mutable working set shared by the editor, the send action and persistence."""

    turns: list[InputTurn] = field(default_factory=lambda: [InputTurn()])
    templates: list[Template] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    last_results: list[str] = field(default_factory=list)

    def add_turn(self) -> InputTurn:
        turn = InputTurn()
        self.turns.append(turn)
        return turn

    def save_template(self, turn: InputTurn) -> Template:
        template = Template.from_turn(turn)
        self.templates.append(template)
        return template

    def load_template(self, template: Template) -> InputTurn:
        turn = template.to_turn()
        self.turns.append(turn)
        return turn

    def set_temperature(self, value: float) -> None:
        if not is_valid_temperature(value):
            raise ValueError(f"temperature out of range: {value}")
        self.settings.temperature = value

    def reset_temperature(self) -> None:
        self.settings.temperature = DEFAULT_TEMPERATURE


def _parse_turn_fields(payload: dict) -> dict:
    if not isinstance(payload, dict):
        raise ValueError("turn entry must be an object")
    role = payload.get("role")
    if role not in CHAT_ROLES:
        raise ValueError(f"Unknown role: {role!r}")
    label = payload.get("label", "")
    content = payload.get("content", "")
    if not isinstance(label, str) or not isinstance(content, str):
        raise ValueError("label and content must be strings")
    return {"role": role, "label": label, "content": content}
