"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

from oralcheck.analyze.transcript import SessionContext
from oralcheck.config import CaptureSettings, OralCheckConfig

SAMPLE_TEXT = (
    "Um, I think the data indicates a significant trend. "
    "Like, it suggests a method to analyze variables."
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ORALCHECK_CONFIG out of the tests."""
    monkeypatch.delenv("ORALCHECK_CONFIG", raising=False)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def context() -> SessionContext:
    return SessionContext()


@pytest.fixture
def small_capture_config() -> OralCheckConfig:
    """Config with a tiny sample rate so cap tests stay fast."""
    return OralCheckConfig(
        capture=CaptureSettings(
            sample_rate=8000,
            frame_size=512,
            history_cap=5,
            max_recording_seconds=1.0,
            max_lag=200,
        )
    )


@pytest.fixture
def sine() -> Callable[..., np.ndarray]:
    """Factory for sine-wave frames."""

    def _make(
        freq: float = 441.0,
        sample_rate: int = 44100,
        size: int = 2048,
        amplitude: float = 0.5,
    ) -> np.ndarray:
        t = np.arange(size) / sample_rate
        return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)

    return _make


class FakeTranscriber:
    """Records calls and returns a fixed transcript or raises."""

    def __init__(self, text: str = SAMPLE_TEXT, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    def __call__(self, audio: bytes, filename: str) -> str:
        self.calls.append((audio, filename))
        if self.error:
            raise self.error
        return self.text


class FakeQuestionGenerator:
    def __init__(self, questions: list[str] | None = None, error: Exception | None = None):
        self.questions = questions if questions is not None else ["Why?", "How?"]
        self.error = error
        self.calls: list[str] = []

    def __call__(self, transcript: str) -> list[str]:
        self.calls.append(transcript)
        if self.error:
            raise self.error
        return list(self.questions)


@pytest.fixture
def fake_transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def fake_questions() -> FakeQuestionGenerator:
    return FakeQuestionGenerator()
