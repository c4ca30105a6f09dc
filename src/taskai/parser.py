"""Turn the language model's reply into an interpreted result."""

import json
import logging

from taskai.models import InterpretedResult, KillDirective, PlainMessage

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response text found."
PARSE_ERROR_TEXT = "Error parsing response."

_FENCE_OPENERS = ("```json", "```JSON", "```")
_FENCE_CLOSER = "```"


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json (or ```) opener and a trailing ``` closer."""
    candidate = text.strip()
    for opener in _FENCE_OPENERS:
        if candidate.startswith(opener):
            candidate = candidate[len(opener):]
            break
    if candidate.endswith(_FENCE_CLOSER):
        candidate = candidate[: -len(_FENCE_CLOSER)]
    return candidate.strip()


def _load_kill_list(candidate: str) -> list[str]:
    """Parse a {"kill": [...]} object. Raises ValueError on any malformation."""
    data = json.loads(candidate)
    if not isinstance(data, dict) or "kill" not in data:
        raise ValueError("reply object has no 'kill' field")
    names = data["kill"]
    if not isinstance(names, list):
        raise ValueError("'kill' is not a list")
    if not all(isinstance(name, str) or name is None for name in names):
        raise ValueError("'kill' holds non-string entries")
    return [name for name in names if name and name.strip()]


def parse_reply(reply_text: str | None) -> InterpretedResult:
    """
    Classify the model's reply as a plain message or a kill directive.

    A directive is only produced from a well-formed {"kill": [...]} object with
    at least one non-blank name. Malformed JSON never yields a directive.
    """
    if not reply_text or not reply_text.strip():
        return PlainMessage(NO_RESPONSE_TEXT)

    candidate = strip_code_fence(reply_text)

    if candidate.startswith("{") and '"kill"' in candidate:
        try:
            names = _load_kill_list(candidate)
        except (ValueError, RecursionError) as exc:
            # json.JSONDecodeError is a ValueError subclass; deep nesting overflows the decoder
            logger.warning("Malformed kill directive: %s", exc)
            return PlainMessage(PARSE_ERROR_TEXT)

        if not names:
            logger.info("Kill directive named no processes")
            return PlainMessage(reply_text.strip())

        return KillDirective(requested_names=tuple(names))

    return PlainMessage(reply_text.strip())
