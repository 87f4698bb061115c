"""
oralcheck.session - Assessment session controller.

Owns the capture lifecycle (start, per-frame feature extraction, a hard
recording cap, idempotent stop) and runs the post-capture pipeline:
transcription → transcript analysis → question generation.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from oralcheck.analyze.features import FeatureExtractor, iter_frames
from oralcheck.analyze.feedback import build_feedback
from oralcheck.analyze.transcript import SessionContext, TranscriptMetrics, analyze_transcript
from oralcheck.config import OralCheckConfig
from oralcheck.exceptions import CaptureError
from oralcheck.results import Outcome
from oralcheck.service import (
    QuestionGenerator,
    Transcriber,
    default_question_generator,
    default_transcriber,
    run_question_generation,
    run_transcription,
)

logger = logging.getLogger(__name__)

CAPTURE_FILENAME = "speech.wav"


class CaptureState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclass
class SessionReport:
    """Everything one assessment produces."""

    audio: bytes
    transcript: str
    metrics: TranscriptMetrics | None
    questions: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    source: str = "capture"

    @property
    def feedback(self) -> dict[str, Any] | None:
        if self.metrics is None:
            return None
        return build_feedback(self.metrics)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view; raw audio is reported by size only."""
        return {
            "source": self.source,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "audio_bytes": len(self.audio),
            "transcript": self.transcript,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "feedback": self.feedback,
            "questions": list(self.questions),
        }


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode float samples in [-1, 1] as mono 16-bit PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()


class AssessmentSession:
    """Controller for a single assessment.

    Only one capture can be active at a time. Frames are analyzed
    synchronously as samples are pushed; provider calls only happen in
    finish() or assess_upload(), one after the other.
    """

    def __init__(
        self,
        config: OralCheckConfig | None = None,
        context: SessionContext | None = None,
        transcriber: Transcriber | None = None,
        question_generator: QuestionGenerator | None = None,
    ) -> None:
        self.config = config or OralCheckConfig()
        self.context = context or SessionContext.from_config(self.config)
        self.transcriber = transcriber or default_transcriber(self.config)
        self.question_generator = question_generator or default_question_generator(self.config)

        self.state = CaptureState.IDLE
        self.sample_rate = self.config.capture.sample_rate
        self.extractor: FeatureExtractor | None = None
        self._chunks: list[np.ndarray] = []
        self._pending = np.zeros(0, dtype=np.float32)
        self._samples_captured = 0

    @property
    def is_recording(self) -> bool:
        return self.state == CaptureState.RECORDING

    @property
    def elapsed_seconds(self) -> float:
        """Seconds of audio captured so far."""
        return self._samples_captured / self.sample_rate

    @property
    def max_samples(self) -> int:
        return int(self.config.capture.max_recording_seconds * self.sample_rate)

    def start(self, sample_rate: int | None = None) -> None:
        """Begin a new capture, discarding audio from any previous one.

        Raises:
            CaptureError: If a capture is already in progress
        """
        if self.is_recording:
            raise CaptureError("A capture is already in progress")

        self.sample_rate = sample_rate or self.config.capture.sample_rate
        self.extractor = FeatureExtractor(self.sample_rate, self.config.capture)
        self._chunks = []
        self._pending = np.zeros(0, dtype=np.float32)
        self._samples_captured = 0
        self.state = CaptureState.RECORDING
        logger.info("Capture started at %d Hz", self.sample_rate)

    def push_samples(self, samples: np.ndarray) -> int:
        """Feed captured samples.

        Complete frames are run through the feature extractor; a trailing
        partial frame waits for the next push. Samples beyond the recording
        cap are discarded and the capture stops itself.

        Returns:
            Number of samples accepted (0 when not recording)
        """
        if not self.is_recording or self.extractor is None:
            return 0

        samples = np.asarray(samples, dtype=np.float32).reshape(-1)
        room = self.max_samples - self._samples_captured
        accepted = samples[:room]

        if len(accepted):
            self._chunks.append(accepted)
            self._samples_captured += len(accepted)
            self._analyze(accepted)

        if self._samples_captured >= self.max_samples:
            logger.info(
                "Recording cap of %.0f s reached, stopping",
                self.config.capture.max_recording_seconds,
            )
            self.stop()

        return len(accepted)

    def _analyze(self, samples: np.ndarray) -> None:
        frame_size = self.config.capture.frame_size
        pending = np.concatenate([self._pending, samples])
        usable = len(pending) - len(pending) % frame_size
        for frame in iter_frames(pending[:usable], frame_size):
            self.extractor.process_frame(frame)
        self._pending = pending[usable:]

    def stop(self) -> None:
        """Stop the capture. Safe to call repeatedly or when not recording."""
        if not self.is_recording:
            return
        self.state = CaptureState.STOPPED
        self._pending = np.zeros(0, dtype=np.float32)
        logger.info("Capture stopped after %.1f s", self.elapsed_seconds)

    def captured_audio(self) -> bytes:
        """Captured audio packaged as WAV (empty bytes if nothing was captured)."""
        if not self._chunks:
            return b""
        return encode_wav(np.concatenate(self._chunks), self.sample_rate)

    def finish(self) -> Outcome[SessionReport]:
        """Stop the capture if needed and run the post-capture pipeline."""
        self.stop()
        if self.state != CaptureState.STOPPED:
            return Outcome.validation("No capture to finish")

        extractor = self.extractor
        return self._run_pipeline(
            audio=self.captured_audio(),
            filename=CAPTURE_FILENAME,
            pitch_series=extractor.pitch_series() if extractor else [],
            loudness_series=extractor.loudness_series() if extractor else [],
            elapsed_seconds=self.elapsed_seconds,
            source="capture",
        )

    def assess_upload(
        self,
        audio: bytes,
        filename: str = "upload.webm",
        duration_seconds: float | None = None,
    ) -> Outcome[SessionReport]:
        """Run the pipeline on uploaded audio; no loudness or pitch history."""
        return self._run_pipeline(
            audio=audio,
            filename=filename,
            pitch_series=[],
            loudness_series=[],
            elapsed_seconds=duration_seconds or 0.0,
            source="upload",
        )

    def _run_pipeline(
        self,
        audio: bytes,
        filename: str,
        pitch_series: list[float],
        loudness_series: list[float],
        elapsed_seconds: float,
        source: str,
    ) -> Outcome[SessionReport]:
        transcription = run_transcription(audio, self.transcriber, filename)
        if not transcription.ok:
            return Outcome(failure=transcription.failure)

        transcript = transcription.value or ""
        metrics = analyze_transcript(
            transcript,
            self.context,
            pitch_series=pitch_series,
            loudness_series=loudness_series,
            elapsed_seconds=elapsed_seconds,
        )

        questions = run_question_generation(transcript, self.question_generator)
        if not questions.ok:
            return Outcome(failure=questions.failure)

        return Outcome.success(
            SessionReport(
                audio=audio,
                transcript=transcript,
                metrics=metrics,
                questions=questions.value or [],
                elapsed_seconds=elapsed_seconds,
                source=source,
            )
        )
