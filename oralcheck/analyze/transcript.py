"""
oralcheck.analyze.transcript - Transcript metrics.

Computes word and filler counts, academic vocabulary matches, type-token
ratio, sentence length, an approximate Flesch reading ease score, speaking
rate and pitch/volume means for a finished transcript.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from oralcheck.config import DEFAULT_FILLER_WORDS
from oralcheck.utils import mean, round_half_up

# Language & literature terms plus general academic register.
SEED_ACADEMIC_WORDS: tuple[str, ...] = (
    "metaphor", "simile", "imagery", "symbolism", "tone", "syntax", "diction",
    "motif", "theme", "persona", "narrative", "voice", "irony", "oxymoron",
    "juxtaposition", "alliteration", "assonance", "sibilance", "enjambment",
    "caesura", "stanza", "structure", "form", "context", "connotation",
    "foregrounding", "lexis", "discourse", "semantic", "mood", "rhythm",
    "meter", "prosody", "register", "attitude",
    "analysis", "analyze", "approach", "argue", "argument", "assess",
    "concept", "conclude", "data", "define", "derive", "evaluate", "evidence",
    "factor", "framework", "hypothesis", "indicate", "interpret", "method",
    "perspective", "research", "significant", "source", "theory", "trend",
    "variable", "variables",
)

MIN_LEARNED_WORD_LENGTH = 6
MAX_LEARNED_WORD_LENGTH = 30

_LEARNABLE = re.compile(r"^[a-z-]+$")
_NON_WORD_CHARS = re.compile(r"[^a-z-]")
_NON_LETTERS = re.compile(r"[^a-z]")
_VOWEL_RUNS = re.compile(r"[aeiouy]+")
_SENTENCE_BREAKS = re.compile(r"[.!?]+")
_EDGE_PUNCTUATION = re.compile(r"^[^\w]+|[^\w]+$")


class VocabularySet:
    """Growable set of academic words.

    Grows monotonically. With max_size set, words are no longer added once
    the set is full; nothing is ever evicted.
    """

    def __init__(self, seed: Iterable[str] = SEED_ACADEMIC_WORDS, max_size: int | None = None):
        self._words: set[str] = {w.lower() for w in seed}
        self.max_size = max_size

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)

    def add(self, word: str) -> bool:
        """Add a word; returns True if the set grew."""
        if word in self._words:
            return False
        if self.max_size is not None and len(self._words) >= self.max_size:
            return False
        self._words.add(word)
        return True

    def learn(self, tokens: Iterable[str]) -> int:
        """Add every learnable token. Returns the number of new words."""
        added = 0
        for token in tokens:
            candidate = _NON_WORD_CHARS.sub("", token.lower())
            if not MIN_LEARNED_WORD_LENGTH <= len(candidate) <= MAX_LEARNED_WORD_LENGTH:
                continue
            if _LEARNABLE.match(candidate) and self.add(candidate):
                added += 1
        return added


@dataclass
class SessionContext:
    """State shared by all analyses within one assessment session."""

    vocabulary: VocabularySet = field(default_factory=VocabularySet)
    filler_words: Sequence[str] = tuple(DEFAULT_FILLER_WORDS)

    @classmethod
    def from_config(cls, config: Any) -> SessionContext:
        return cls(
            vocabulary=VocabularySet(max_size=config.vocabulary_cap),
            filler_words=tuple(config.filler_words),
        )


@dataclass(frozen=True)
class TranscriptMetrics:
    """Metrics for one transcript."""

    word_count: int
    filler_count: int
    filler_rate: float
    academic_matches: int
    academic_words: list[str]
    type_token_ratio: float
    avg_sentence_length: float
    readability: int
    pitch_mean: int
    volume_mean: float
    words_per_minute: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def tokenize(text: str) -> list[str]:
    """Split normalized text on whitespace runs."""
    return text.split()


def bare_word(token: str) -> str:
    """Lowercase a token and strip leading/trailing punctuation ("Um," -> "um")."""
    return _EDGE_PUNCTUATION.sub("", token.lower())


def count_fillers(normalized: str, tokens: Sequence[str], filler_words: Iterable[str]) -> int:
    """Count filler phrases.

    Multi-word phrases are matched as substrings of the lowered text;
    single words are matched against punctuation-stripped tokens. Phrases
    are counted independently, so overlapping phrases count twice.
    """
    lowered = normalized.lower()
    bare_tokens = [bare_word(t) for t in tokens]
    count = 0
    for phrase in filler_words:
        phrase = phrase.lower()
        if " " in phrase:
            count += len(re.findall(re.escape(phrase), lowered))
        else:
            count += sum(1 for t in bare_tokens if t == phrase)
    return count


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_BREAKS.split(text) if s.strip()]


def count_syllables(token: str) -> int:
    """Approximate syllables as vowel runs, minus a silent trailing e; at least 1."""
    cleaned = _NON_LETTERS.sub("", token.lower())
    syllables = len(_VOWEL_RUNS.findall(cleaned))
    if cleaned.endswith("e"):
        syllables = max(1, syllables - 1)
    return max(1, syllables)


def reading_ease(word_count: int, sentence_count: int, syllable_count: int) -> int:
    """Approximate Flesch reading ease, clamped at 0."""
    words_per_sentence = word_count / max(1, sentence_count)
    syllables_per_word = syllable_count / max(1, word_count)
    score = max(0.0, 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word)
    return int(round_half_up(score))


def finite_mean(values: Iterable[float]) -> float:
    """Mean of the finite values; NaN and infinities are skipped."""
    result = mean(v for v in values if math.isfinite(v))
    return result if math.isfinite(result) else 0.0


def analyze_transcript(
    text: str | None,
    context: SessionContext,
    pitch_series: Sequence[float] = (),
    loudness_series: Sequence[float] = (),
    elapsed_seconds: float = 0.0,
) -> TranscriptMetrics | None:
    """Compute metrics for a transcript.

    Args:
        text: Final transcript text
        context: Session context; its vocabulary grows in place
        pitch_series: Pitch estimates (Hz) gathered during capture
        loudness_series: RMS values gathered during capture
        elapsed_seconds: Capture duration, 0 for uploads

    Returns:
        TranscriptMetrics, or None for an empty or whitespace-only transcript
    """
    if not text or not text.strip():
        return None

    normalized = text.replace("\n", " ").strip()
    tokens = tokenize(normalized)
    word_count = len(tokens)

    filler_count = count_fillers(normalized, tokens, context.filler_words)

    context.vocabulary.learn(tokens)
    matched = [w for w in (bare_word(t) for t in tokens) if w in context.vocabulary]

    unique_tokens = {t.lower() for t in tokens}

    sentences = split_sentences(normalized)
    if sentences:
        avg_sentence_length = sum(len(tokenize(s)) for s in sentences) / len(sentences)
    else:
        avg_sentence_length = 0.0

    syllable_count = sum(count_syllables(t) for t in tokens)

    minutes = max(1.0, elapsed_seconds / 60)

    return TranscriptMetrics(
        word_count=word_count,
        filler_count=filler_count,
        filler_rate=filler_count / max(1, word_count),
        academic_matches=len(matched),
        academic_words=sorted(set(matched)),
        type_token_ratio=len(unique_tokens) / max(1, word_count),
        avg_sentence_length=avg_sentence_length,
        readability=reading_ease(word_count, len(sentences), syllable_count),
        pitch_mean=int(round_half_up(finite_mean(pitch_series))),
        volume_mean=round_half_up(finite_mean(loudness_series), 3),
        words_per_minute=int(round_half_up(word_count / minutes)),
    )
