"""
oralcheck.llm.questions - Follow-up question generation.

Asks the LLM for a few probing questions about a transcript and parses the
free-text completion into a clean list.
"""

from __future__ import annotations

import re
from typing import Any

from oralcheck.llm.templates import PromptTemplateManager

QUESTIONS_TEMPLATE = "questions.txt"

_LEADING_ORDINAL = re.compile(r"^\d+[.)]?\s*")


def build_questions_prompt(
    transcript: str,
    template_manager: PromptTemplateManager,
    question_count: int = 4,
) -> str:
    """Render the question prompt for a transcript."""
    return template_manager.render(
        QUESTIONS_TEMPLATE,
        {
            "TRANSCRIPT": transcript.replace('\\"', '"'),
            "QUESTION_COUNT": question_count,
        },
    )


def parse_questions(text: str, limit: int = 4) -> list[str]:
    """Split a completion into questions.

    Lines are trimmed, blank lines dropped, leading numbering such as "1."
    or "2)" removed, and the list capped at limit entries.
    """
    questions = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        question = _LEADING_ORDINAL.sub("", line).strip()
        if question:
            questions.append(question)
    return questions[:limit]


def generate_questions(
    transcript: str,
    client: Any,
    template_manager: PromptTemplateManager | None = None,
    question_count: int = 4,
    max_tokens: int = 200,
    temperature: float = 0.7,
) -> list[str]:
    """Generate follow-up questions for a transcript.

    Args:
        transcript: Transcript text
        client: LLMClient instance
        template_manager: PromptTemplateManager, defaults to packaged prompts
        question_count: Maximum number of questions to return
        max_tokens: Completion token limit
        temperature: Sampling temperature

    Returns:
        List of at most question_count questions

    Raises:
        LLMError: If the provider request fails
    """
    template_manager = template_manager or PromptTemplateManager()
    prompt = build_questions_prompt(transcript, template_manager, question_count)
    response = client.complete(prompt, max_tokens=max_tokens, temperature=temperature)
    return parse_questions(response, limit=question_count)
