"""
Oralcheck - Oral assessment toolkit.

Takes a recorded or uploaded speech and produces automated feedback
through a short pipeline: capture with loudness/pitch estimation →
transcription → transcript metrics → follow-up question generation.
"""

__version__ = "0.1.0"
