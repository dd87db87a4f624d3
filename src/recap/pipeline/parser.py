"""Response parser -- turns the assistant's reply into a ParsedResult.

The assistant is asked for a JSON object but nothing guarantees it sends
one, so the reply is validated against an explicit schema right away:

    {"notes_markdown": str, "voiceover_script": str (optional)}

Decode and schema failures keep the raw text on the error so operators can
see exactly what came back. There is no retry.
"""

from __future__ import annotations

import json

import structlog
from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic import ValidationError as PydanticValidationError

from src.recap.errors import MalformedResponseError
from src.recap.schemas import ParsedResult

logger = structlog.get_logger(__name__)


class AssistantPayload(BaseModel):
    """Expected JSON object in the assistant's text reply."""

    model_config = ConfigDict(extra="ignore")

    notes_markdown: StrictStr
    voiceover_script: StrictStr | None = None


def select_assistant_text(messages: list[dict]) -> str:
    """Return the text of the first assistant message.

    Args:
        messages: Thread messages, newest first, as returned by the API.

    Raises:
        MalformedResponseError: No assistant message, empty content, or a
            first content part that is not text.
    """
    if not isinstance(messages, list):
        raise MalformedResponseError("No assistant response found")

    assistant_msg = next(
        (m for m in messages if isinstance(m, dict) and m.get("role") == "assistant"),
        None,
    )
    content = assistant_msg.get("content") if assistant_msg is not None else None
    if not content:
        raise MalformedResponseError("No assistant response found")
    if not isinstance(content, list):
        raise MalformedResponseError("Unexpected assistant content type")

    first_part = content[0]
    if not isinstance(first_part, dict) or first_part.get("type") != "text":
        raise MalformedResponseError("Unexpected assistant content type")

    text = first_part.get("text")
    value = text.get("value") if isinstance(text, dict) else None
    if not isinstance(value, str):
        raise MalformedResponseError("Unexpected assistant content type")
    return value


def parse_payload(raw: str) -> ParsedResult:
    """Decode and validate the assistant's JSON text."""
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("recap.parse_failed", reason="invalid_json", raw_length=len(raw))
        raise MalformedResponseError("Failed to parse JSON from assistant", raw=raw) from None

    try:
        payload = AssistantPayload.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning(
            "recap.parse_failed",
            reason="schema_mismatch",
            errors=exc.error_count(),
            raw_length=len(raw),
        )
        raise MalformedResponseError(
            "Assistant response did not match the expected schema", raw=raw
        ) from None

    return ParsedResult(
        notes_markdown=payload.notes_markdown,
        voiceover_script=payload.voiceover_script or "",
    )


def parse_assistant_reply(messages: list[dict]) -> ParsedResult:
    return parse_payload(select_assistant_text(messages))
