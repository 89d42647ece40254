from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from .completion_client import CompletionError, complete
from .models import ChatModel, InputTurn, Message, Session

logger = logging.getLogger(__name__)

CompletionFn = Callable[..., list[str]]


def build_messages(turns: Iterable[InputTurn]) -> list[Message]:
    # ラベルは画面上の名前なので送信しない
    return [turn.to_message() for turn in turns]


@dataclass(frozen=True)
class CompletionRequest:
    api_key: str
    model: ChatModel
    messages: tuple[Message, ...]
    temperature: float

    @classmethod
    def snapshot(cls, session: Session) -> "CompletionRequest":
        settings = session.settings
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            messages=tuple(build_messages(session.turns)),
            temperature=settings.temperature,
        )


@dataclass(frozen=True)
class CompletionOutcome:
    completions: tuple[str, ...] = ()
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def results(self) -> list[str]:
        if self.error is not None:
            return [self.error]
        return list(self.completions)


def run_request(
    request: CompletionRequest,
    client: CompletionFn = complete,
    **client_kwargs: Any,
) -> CompletionOutcome:
    """Perform the blocking call and fold every failure into the outcome."""

    try:
        completions: Sequence[str] = client(
            request.api_key,
            request.model,
            list(request.messages),
            request.temperature,
            **client_kwargs,
        )
    except CompletionError as exc:
        logger.warning("Completion failed: %s", type(exc).__name__)
        return CompletionOutcome(error=str(exc))
    except Exception as exc:  # pragma: no cover - runtime safety
        logger.exception("Unexpected failure while requesting a completion")
        return CompletionOutcome(error=f"Unexpected error: {exc}")
    return CompletionOutcome(completions=tuple(completions))


def apply_outcome(session: Session, outcome: CompletionOutcome) -> None:
    session.last_results = outcome.results
