from __future__ import annotations

import json
import logging
from typing import Any, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .models import ChatModel, Message

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_TIMEOUT_SEC = 120.0


class CompletionError(RuntimeError):
    """Base class for failures whose text is shown in place of completions."""


class TransportError(CompletionError):
    """The request never produced an HTTP response."""


class ResponseDecodeError(CompletionError):
    """The response body is not JSON; the message is the raw body."""


class ApiError(CompletionError):
    """The service answered with an ``error`` object."""


class ResponseShapeError(CompletionError):
    """The response is JSON but lacks the expected ``choices`` layout."""


def build_payload(model: ChatModel, messages: Sequence[Message], temperature: float) -> dict[str, Any]:
    return {
        "model": model.identifier,
        "messages": [message.to_dict() for message in messages],
        "frequency_penalty": 0.0,
        "logit_bias": None,
        "n": 1,
        "presence_penalty": 0.0,
        "temperature": temperature,
        "top_p": 1.0,
    }


def complete(
    api_key: str,
    model: ChatModel,
    messages: Sequence[Message],
    temperature: float,
    *,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> list[str]:
    """Send one chat completion request and return the completion texts.

    Raises a ``CompletionError`` subclass for every failure; ``str(exc)`` is
    the text to display to the user.
    """

    payload = json.dumps(build_payload(model, messages, temperature)).encode("utf-8")
    logger.info("Requesting %s with %d message(s)", model.identifier, len(messages))
    body = _post(endpoint, payload, api_key, timeout)
    return parse_response(body)


def parse_response(body: bytes) -> list[str]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ResponseDecodeError(body.decode("utf-8", errors="replace")) from exc

    try:
        response = json.loads(text)
    except json.JSONDecodeError as exc:
        # 生のレスポンスをそのまま表示できるよう本文を返す
        raise ResponseDecodeError(text) from exc

    if isinstance(response, dict) and "error" in response:
        raise ApiError(json.dumps(response, ensure_ascii=False))

    choices = response.get("choices") if isinstance(response, dict) else None
    if not isinstance(choices, list):
        raise ResponseShapeError(f"Unexpected response: 'choices' is not a list: {text}")

    completions: list[str] = []
    for index, choice in enumerate(choices):
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ResponseShapeError(f"Unexpected response: choice {index} has no text content: {text}")
        completions.append(content)
    return completions


def _post(url: str, payload: bytes, api_key: str, timeout: float) -> bytes:
    request = Request(
        url,
        data=payload,
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        method="POST",
    )
    try:
        with urlopen(request, timeout=timeout) as response:
            return response.read()
    except HTTPError as exc:
        # エラー応答でも本文に JSON の error が入っているので読み取って解釈する
        logger.warning("Completion endpoint returned HTTP %s", exc.code)
        try:
            return exc.read()
        finally:
            exc.close()
    except URLError as exc:
        raise TransportError(f"Request failed: {exc.reason}") from exc
    except (TimeoutError, OSError) as exc:
        raise TransportError(f"Request failed: {exc}") from exc
