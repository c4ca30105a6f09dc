"""Gemini client that interprets a command against the process summary."""

import logging
from typing import Protocol

import requests

from taskai.errors import ModelClientError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.5-flash"

ENVELOPE_ERROR_TEXT = "Error parsing model response."

POLICY_TEMPLATE = (
    "You are a task assistant with access to the following running processes:\n\n"
    "{summary}\n"
    "When users ask about specific processes or want to close/kill applications, "
    "ONLY include processes from the above list in your response. "
    "Return a JSON object using this format:\n\n"
    "json\n"
    "{{\n"
    '  "kill": ["ProcessName1", "ProcessName2"]\n'
    "}}\n\n\n"
    "If the user specifically asks for a process by name, ONLY include that process "
    "if it's in the list. Don't suggest killing processes the user is actively using "
    "(like browsers) unless specifically requested. For questions completely unrelated "
    "to processes, provide a helpful response as normal."
)


def build_prompt(process_summary: str) -> str:
    """Static policy text wrapped around the process summary."""
    return POLICY_TEMPLATE.format(summary=process_summary)


class ModelClient(Protocol):
    """Turns a user command plus a process summary into raw reply text."""

    def interpret(self, prompt_text: str, process_summary: str) -> str: ...


def extract_text(envelope: dict) -> str:
    """
    Pull the reply text out of a generateContent response.

    Returns an empty string when the model produced no text part.

    Raises:
        ModelClientError: The envelope does not have the expected shape.
    """
    try:
        candidates = envelope.get("candidates") or []
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts") or []
        if not parts:
            return ""
        return parts[0].get("text") or ""
    except (AttributeError, TypeError) as exc:
        raise ModelClientError(ENVELOPE_ERROR_TEXT) from exc


class GeminiClient:
    """
    Client for the Gemini generateContent API.

    Requests are made once; failures are raised as ModelClientError and are
    never retried.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the GeminiClient.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            model: Model name, e.g. ``gemini-2.5-flash``.
            endpoint: Base URL of the models collection.
            timeout: Request timeout in seconds.
            session: Optional requests session (a new one is created if omitted).
        """
        if not api_key:
            raise ModelClientError("API key is not set")
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self._endpoint}/{self._model}:generateContent"

    def build_payload(self, prompt_text: str, process_summary: str) -> dict:
        """generateContent body: the policy part followed by the user's command."""
        return {
            "contents": [
                {"role": "user", "parts": [{"text": build_prompt(process_summary)}]},
                {"role": "user", "parts": [{"text": prompt_text}]},
            ]
        }

    def interpret(self, prompt_text: str, process_summary: str) -> str:
        """Send the command to the model and return its raw reply text."""
        payload = self.build_payload(prompt_text, process_summary)
        logger.info("Asking %s to interpret %r", self._model, prompt_text)

        try:
            response = self._session.post(
                self.url,
                params={"key": self._api_key},
                json=payload,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Model request failed: %s", _redact(str(exc), self._api_key))
            raise ModelClientError(_redact(str(exc), self._api_key)) from exc

        try:
            envelope = response.json()
        except ValueError as exc:
            logger.error("Model returned a non-JSON body")
            raise ModelClientError(ENVELOPE_ERROR_TEXT) from exc

        if not isinstance(envelope, dict):
            raise ModelClientError(ENVELOPE_ERROR_TEXT)
        return extract_text(envelope)


def _redact(message: str, secret: str) -> str:
    """Hide the API key, which requests echoes back in URLs."""
    return message.replace(secret, "***") if secret else message
