"""
oralcheck.exceptions - Custom exception classes.

All Oralcheck-specific exceptions inherit from OralCheckError.
"""


class OralCheckError(Exception):
    """Base exception for all Oralcheck errors."""

    pass


class ConfigError(OralCheckError):
    """Configuration loading or validation error."""

    pass


class CaptureError(OralCheckError):
    """Audio capture lifecycle error."""

    pass


class TranscriptionError(OralCheckError):
    """Speech-to-text provider error."""

    pass


class LLMError(OralCheckError):
    """LLM backend or prompt error."""

    pass


class LLMResponseError(LLMError):
    """LLM returned malformed or unexpected response."""

    pass
