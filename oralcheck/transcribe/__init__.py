"""
oralcheck.transcribe - Speech-to-text.

Sends captured or uploaded audio to a hosted transcription model and
returns the transcript text.
"""

from __future__ import annotations
