"""
oralcheck.analyze - Speech analysis.

Per-frame loudness/pitch extraction during capture, transcript metrics
after transcription, and rating bands with narrative feedback.
"""

from __future__ import annotations
