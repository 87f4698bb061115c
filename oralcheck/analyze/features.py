"""
oralcheck.analyze.features - Per-frame loudness and pitch estimation.

Computes RMS loudness and a coarse lag-search pitch estimate for each
fixed-size audio frame, keeping bounded histories of both for the
transcript analyzer.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from oralcheck.config import CaptureSettings


@dataclass(frozen=True)
class FrameFeatures:
    """Features computed for a single frame. pitch_hz is None when rejected."""

    rms: float
    pitch_hz: float | None


def frame_rms(frame: np.ndarray) -> float:
    """Root-mean-square amplitude of a frame (0.0 for an empty frame)."""
    if len(frame) == 0:
        return 0.0
    samples = np.asarray(frame, dtype=np.float64)
    return float(np.sqrt(np.mean(samples**2)))


def estimate_pitch(
    frame: np.ndarray,
    sample_rate: int,
    min_lag: int = 10,
    max_lag: int = 500,
    silence_threshold: float = 0.01,
    min_similarity: float = 0.5,
) -> float | None:
    """Estimate the fundamental frequency of a frame by naive lag search.

    For every candidate lag the frame is compared with itself shifted by
    that lag; the score is one minus the mean absolute difference. The
    best-scoring lag is converted to a frequency.

    Args:
        frame: Samples in [-1, 1]
        sample_rate: Capture sample rate in Hz
        min_lag: First candidate lag (inclusive)
        max_lag: Upper bound on candidate lags (exclusive)
        silence_threshold: Frames with RMS below this are rejected
        min_similarity: Best score must exceed this to be accepted

    Returns:
        Pitch in Hz, or None for silent or aperiodic frames
    """
    samples = np.asarray(frame, dtype=np.float64)
    size = len(samples)
    if size == 0 or frame_rms(samples) < silence_threshold:
        return None

    best_lag = -1
    best_score = 0.0
    for lag in range(min_lag, min(max_lag, size - 2)):
        score = 1.0 - float(np.mean(np.abs(samples[: size - lag] - samples[lag:])))
        if score > best_score:
            best_score = score
            best_lag = lag

    if best_score > min_similarity and best_lag > 0:
        return sample_rate / best_lag
    return None


def iter_frames(samples: np.ndarray, frame_size: int) -> Iterator[np.ndarray]:
    """Yield consecutive non-overlapping frames, dropping a trailing partial frame."""
    for start in range(0, len(samples) - frame_size + 1, frame_size):
        yield samples[start : start + frame_size]


class FeatureExtractor:
    """Maintains bounded loudness and pitch histories for a capture."""

    def __init__(self, sample_rate: int, settings: CaptureSettings | None = None) -> None:
        self.sample_rate = sample_rate
        self.settings = settings or CaptureSettings()
        self.loudness: deque[float] = deque(maxlen=self.settings.history_cap)
        self.pitch: deque[float] = deque(maxlen=self.settings.history_cap)
        self.frames_processed = 0

    def process_frame(self, frame: np.ndarray) -> FrameFeatures:
        """Compute features for one frame and append them to the histories."""
        rms = frame_rms(frame)
        self.loudness.append(rms)

        pitch = estimate_pitch(
            frame,
            self.sample_rate,
            min_lag=self.settings.min_lag,
            max_lag=self.settings.max_lag,
            silence_threshold=self.settings.silence_threshold,
            min_similarity=self.settings.min_similarity,
        )
        if pitch is not None:
            self.pitch.append(pitch)

        self.frames_processed += 1
        return FrameFeatures(rms=rms, pitch_hz=pitch)

    def loudness_series(self) -> list[float]:
        return list(self.loudness)

    def pitch_series(self) -> list[float]:
        return list(self.pitch)
