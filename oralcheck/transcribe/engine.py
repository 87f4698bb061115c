"""
oralcheck.transcribe.engine - Hosted transcription via litellm.

Wraps raw audio bytes as a named file, sends them to the configured
transcription model and extracts the transcript text from the response.
"""

from __future__ import annotations

import io
import logging
from typing import Any

from oralcheck.exceptions import TranscriptionError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "speech.webm"


def transcribe_audio(
    audio: bytes,
    filename: str = DEFAULT_FILENAME,
    model: str = "gpt-4o-transcribe",
    api_key: str | None = None,
    timeout: float | None = None,
) -> str:
    """Transcribe audio bytes.

    Args:
        audio: Encoded audio (webm, wav, mp3, ...)
        filename: Name sent with the upload; its extension tells the
            provider the container format
        model: Transcription model name
        api_key: Provider key; litellm reads OPENAI_API_KEY when None
        timeout: Optional request timeout in seconds

    Returns:
        Transcript text (possibly empty)

    Raises:
        TranscriptionError: If the provider request fails
    """
    import litellm

    litellm.telemetry = False

    audio_file = io.BytesIO(audio)
    audio_file.name = filename or DEFAULT_FILENAME

    kwargs: dict[str, Any] = {"model": model, "file": audio_file}
    if api_key:
        kwargs["api_key"] = api_key
    if timeout:
        kwargs["timeout"] = timeout

    logger.debug("Transcribing %d bytes as %s with %s", len(audio), audio_file.name, model)

    try:
        response = litellm.transcription(**kwargs)
    except Exception as e:
        logger.error("Transcription request to %s failed: %s", model, e)
        raise TranscriptionError(str(e)) from e

    return extract_transcript_text(response)


def extract_transcript_text(response: Any) -> str:
    """Pull the transcript out of a provider response.

    Accepts response objects or plain dicts carrying "text" or
    "transcript", falling back to the first choice's text.
    """
    if response is None:
        return ""

    def _get(obj: Any, key: str) -> Any:
        if isinstance(obj, dict):
            return obj.get(key)
        return getattr(obj, key, None)

    for key in ("text", "transcript"):
        value = _get(response, key)
        if isinstance(value, str) and value:
            return value

    choices = _get(response, "choices")
    if choices:
        value = _get(choices[0], "text")
        if isinstance(value, str):
            return value

    return ""
