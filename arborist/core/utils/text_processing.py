"""Text extraction and preprocessing for work item content analysis.

The pipeline is pure and deterministic:

    normalize (NFD, strip combining marks, lowercase)
      -> clean (non-word chars and hyphens/underscores to spaces, collapse)
      -> tokenize (split on whitespace)
      -> optional stop word removal
      -> minimum length filter

Examples:
    >>> preprocess_single_text("Café-Menu: Add Items!").tokens
    ['cafe', 'menu', 'add', 'items']
"""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass

from arborist.core.models import ItemContent

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "been", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the", "to",
        "was", "will", "with", "would", "could", "should", "have", "had", "can",
        "may", "this", "these", "those", "they", "them", "their", "we", "our",
        "you", "your", "i", "my", "me", "am", "do", "does", "did", "get", "got",
        "all", "any", "but", "if", "not", "or", "so", "when", "where", "who",
        "what", "how", "up", "out", "down", "off", "over", "under", "again",
        "further", "then", "once", "than", "too", "very", "own", "same", "few",
        "more", "most", "other", "some", "such", "only", "just", "now", "here",
        "there", "about", "into", "through", "during", "before", "after", "above",
        "below", "between", "both", "each", "either", "neither", "against",
    }
)  # fmt: skip

_NON_WORD_RE = re.compile(r"[^\w\s-]")
_HYPHEN_UNDERSCORE_RE = re.compile(r"[-_]+")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractedText:
    """Raw text fields of an item plus their space-joined combination."""

    title: str
    description: str
    vision: str
    combined: str


@dataclass(frozen=True)
class ProcessedText:
    """Output of the single-string pipeline."""

    original: str
    normalized: str
    cleaned: str
    tokens: list[str]


@dataclass(frozen=True)
class FieldTokens:
    title: list[str]
    description: list[str]
    vision: list[str]
    combined: list[str]


@dataclass(frozen=True)
class PreprocessedText:
    """Per-field preprocessing result for an item."""

    original: ExtractedText
    normalized: ExtractedText
    cleaned: ExtractedText
    tokens: FieldTokens

    def ordered_tokens(self) -> list[str]:
        """Title, then description, then vision tokens (duplicates kept)."""
        return [*self.tokens.title, *self.tokens.description, *self.tokens.vision]


def extract_text(item: ItemContent) -> ExtractedText:
    """Extract text fields from item content."""
    title = item.title or ""
    description = item.description or ""
    vision = item.vision or ""
    return ExtractedText(
        title=title,
        description=description,
        vision=vision,
        combined=" ".join(part for part in (title, description, vision) if part),
    )


def normalize_text(text: str) -> str:
    """Lowercase and strip diacritical marks."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


def clean_text(text: str) -> str:
    """Replace punctuation, hyphens and underscores with single spaces."""
    text = _NON_WORD_RE.sub(" ", text)
    text = _HYPHEN_UNDERSCORE_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def tokenize_text(text: str) -> list[str]:
    if not text.strip():
        return []
    return [token for token in text.split() if token]


def remove_stop_words(tokens: list[str]) -> list[str]:
    return [token for token in tokens if token.lower() not in STOP_WORDS]


def filter_by_length(tokens: list[str], min_length: int = 2) -> list[str]:
    return [token for token in tokens if len(token) >= min_length]


def preprocess_single_text(
    text: str,
    remove_stopwords: bool = True,
    min_token_length: int = 2,
) -> ProcessedText:
    """Run the full preprocessing pipeline over a single string.

    Args:
        text: Raw input text
        remove_stopwords: Drop tokens present in STOP_WORDS
        min_token_length: Drop tokens shorter than this

    Returns:
        ProcessedText with each intermediate stage
    """
    normalized = normalize_text(text)
    cleaned = clean_text(normalized)
    tokens = tokenize_text(cleaned)

    if remove_stopwords:
        tokens = remove_stop_words(tokens)

    tokens = filter_by_length(tokens, min_token_length)

    return ProcessedText(
        original=text, normalized=normalized, cleaned=cleaned, tokens=tokens
    )


def preprocess_action_text(
    item: ItemContent,
    remove_stopwords: bool = True,
    min_token_length: int = 2,
) -> PreprocessedText:
    """Preprocess title, description, vision and their combination."""
    extracted = extract_text(item)

    fields = {
        name: preprocess_single_text(
            getattr(extracted, name),
            remove_stopwords=remove_stopwords,
            min_token_length=min_token_length,
        )
        for name in ("title", "description", "vision", "combined")
    }

    return PreprocessedText(
        original=extracted,
        normalized=ExtractedText(
            **{name: processed.normalized for name, processed in fields.items()}
        ),
        cleaned=ExtractedText(
            **{name: processed.cleaned for name, processed in fields.items()}
        ),
        tokens=FieldTokens(
            **{name: processed.tokens for name, processed in fields.items()}
        ),
    )


def get_all_tokens(preprocessed: PreprocessedText) -> list[str]:
    """Unique tokens across fields, in first-seen order."""
    return list(dict.fromkeys(preprocessed.ordered_tokens()))


def get_token_frequency(preprocessed: PreprocessedText) -> Counter[str]:
    return Counter(preprocessed.ordered_tokens())


def get_top_tokens(
    preprocessed: PreprocessedText, limit: int = 10
) -> list[tuple[str, int]]:
    """Most frequent tokens; ties keep first-seen order."""
    frequency = get_token_frequency(preprocessed)
    ranked = sorted(frequency.items(), key=lambda pair: pair[1], reverse=True)
    return ranked[:limit]
