"""
oralcheck.llm - Follow-up question generation.

Renders the question prompt, sends it through a litellm-backed client
and parses the completion into a short list of questions.
"""

from __future__ import annotations
