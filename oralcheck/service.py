"""
oralcheck.service - Request/response operations over the external providers.

Both operations return an Outcome instead of raising: empty input is a
validation failure, provider errors are upstream failures carrying the
provider's error text, and anything else is an internal failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from oralcheck.config import OralCheckConfig
from oralcheck.exceptions import LLMError, TranscriptionError
from oralcheck.llm.client import create_client_from_config
from oralcheck.llm.questions import generate_questions
from oralcheck.llm.templates import PromptTemplateManager
from oralcheck.results import Outcome
from oralcheck.transcribe.engine import DEFAULT_FILENAME, transcribe_audio

logger = logging.getLogger(__name__)

Transcriber = Callable[[bytes, str], str]
QuestionGenerator = Callable[[str], list[str]]


def default_transcriber(config: OralCheckConfig) -> Transcriber:
    """Build a transcriber bound to the configured model and credentials."""

    def _transcribe(audio: bytes, filename: str) -> str:
        return transcribe_audio(
            audio,
            filename=filename,
            model=config.transcription_model,
            api_key=config.api_key,
            timeout=config.llm_timeout,
        )

    return _transcribe


def default_question_generator(
    config: OralCheckConfig,
    client: Any | None = None,
    template_manager: PromptTemplateManager | None = None,
) -> QuestionGenerator:
    """Build a question generator bound to the configured LLM."""
    client = client or create_client_from_config(config)
    template_manager = template_manager or PromptTemplateManager()

    def _generate(transcript: str) -> list[str]:
        return generate_questions(
            transcript,
            client,
            template_manager=template_manager,
            question_count=config.question_count,
            max_tokens=config.question_max_tokens,
            temperature=config.question_temperature,
        )

    return _generate


def run_transcription(
    audio: bytes | None,
    transcriber: Transcriber,
    filename: str = DEFAULT_FILENAME,
) -> Outcome[str]:
    """Transcribe audio, classifying any failure."""
    if not audio:
        return Outcome.validation("No audio provided")

    try:
        return Outcome.success(transcriber(audio, filename))
    except TranscriptionError as e:
        return Outcome.upstream("Transcription failed", str(e))
    except Exception as e:
        logger.exception("Unexpected transcription error")
        return Outcome.internal("Transcription failed", str(e) or type(e).__name__)


def run_question_generation(
    transcript: str,
    generator: QuestionGenerator,
) -> Outcome[list[str]]:
    """Generate questions, classifying any failure."""
    try:
        return Outcome.success(generator(transcript or ""))
    except LLMError as e:
        return Outcome.upstream("Question generation API error", str(e))
    except Exception as e:
        logger.exception("Unexpected question generation error")
        return Outcome.internal("Question generation failed", str(e) or type(e).__name__)
