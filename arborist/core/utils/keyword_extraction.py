"""Keyword and phrase extraction for work item content.

Builds on the text-processing pipeline to score single terms and n-gram
phrases, and compares two items with a three-signal keyword similarity.

Scoring methods:
    frequency: raw occurrence count
    tfidf:     corpus-free TF-IDF approximation (length boost, frequency penalty)
    weighted:  tfidf x position bonus x length bonus (default)

There is no corpus, so "IDF" is approximated by favoring longer terms and
penalizing terms that repeat more than three times.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

from arborist.core.models import ItemContent, KeywordTerm, ScoringMethod
from arborist.core.utils.text_processing import (
    PreprocessedText,
    preprocess_action_text,
)


@dataclass(frozen=True)
class ExtractionOptions:
    """Options for keyword and phrase extraction."""

    max_keywords: int = 10
    max_phrases: int = 5
    min_keyword_length: int = 3
    max_phrase_length: int = 50
    min_phrase_words: int = 2
    max_phrase_words: int = 4
    scoring_method: ScoringMethod = "weighted"


DEFAULT_EXTRACTION_OPTIONS = ExtractionOptions()

PHRASE_BOOST = 1.5


@dataclass(frozen=True)
class ExtractionMetadata:
    total_tokens: int
    unique_tokens: int
    avg_word_length: float
    total_phrases: int


@dataclass(frozen=True)
class KeywordExtractionResult:
    """Single keywords, phrases, and their de-duplicated combination."""

    keywords: list[KeywordTerm]
    phrases: list[KeywordTerm]
    combined: list[KeywordTerm]
    metadata: ExtractionMetadata = field(
        default_factory=lambda: ExtractionMetadata(0, 0, 0.0, 0)
    )

    def to_dict(self) -> dict:
        return {
            "keywords": [k.to_dict() for k in self.keywords],
            "phrases": [p.to_dict() for p in self.phrases],
            "combined": [c.to_dict() for c in self.combined],
            "metadata": {
                "total_tokens": self.metadata.total_tokens,
                "unique_tokens": self.metadata.unique_tokens,
                "avg_word_length": self.metadata.avg_word_length,
                "total_phrases": self.metadata.total_phrases,
            },
        }


def calculate_tfidf_score(
    term_freq: int, total_terms: int, term_length: int, avg_term_length: float
) -> float:
    """Approximate TF-IDF for a term without a document corpus."""
    if total_terms <= 0 or avg_term_length <= 0:
        return 0.0

    tf = term_freq / total_terms
    length_boost = min(term_length / avg_term_length, 2.0)
    frequency_penalty = math.log10(term_freq) if term_freq > 3 else 1.0

    return (tf * length_boost) / frequency_penalty


def calculate_weighted_score(
    term_freq: int,
    total_terms: int,
    term_length: int,
    avg_term_length: float,
    positions: tuple[int, ...],
    total_positions: int,
) -> float:
    """TF-IDF score boosted for early position and meaningful length."""
    tfidf_score = calculate_tfidf_score(
        term_freq, total_terms, term_length, avg_term_length
    )

    if positions and total_positions > 0:
        avg_position = sum(positions) / len(positions)
        position_bonus = max(0.0, 1 - avg_position / total_positions) * 0.2 + 1
    else:
        position_bonus = 1.0

    length_bonus = min(max(term_length - 2, 1) / 8, 1.5)

    return tfidf_score * position_bonus * length_bonus


def _score(
    method: ScoringMethod,
    freq: int,
    total_terms: int,
    length: int,
    avg_length: float,
    positions: tuple[int, ...],
    total_positions: int,
) -> float:
    if method == "frequency":
        return float(freq)
    if method == "tfidf":
        return calculate_tfidf_score(freq, total_terms, length, avg_length)
    return calculate_weighted_score(
        freq, total_terms, length, avg_length, positions, total_positions
    )


def _sort_by_score(terms: list[KeywordTerm]) -> list[KeywordTerm]:
    # sorted() is stable, so equal scores keep insertion order
    return sorted(terms, key=lambda k: k.score, reverse=True)


def _scoring_tokens(preprocessed: PreprocessedText, min_length: int) -> list[str]:
    return [t for t in preprocessed.ordered_tokens() if len(t) >= min_length]


def extract_keywords(
    preprocessed: PreprocessedText,
    options: ExtractionOptions = DEFAULT_EXTRACTION_OPTIONS,
) -> list[KeywordTerm]:
    """Score single-word keywords from title, description and vision tokens.

    Title tokens come first so that the position bonus favors them.
    """
    all_tokens = _scoring_tokens(preprocessed, options.min_keyword_length)
    if not all_tokens:
        return []

    token_positions: dict[str, list[int]] = {}
    for position, token in enumerate(all_tokens):
        token_positions.setdefault(token, []).append(position)

    total_positions = len(all_tokens)
    avg_term_length = sum(len(t) for t in all_tokens) / len(all_tokens)

    keywords = []
    for term, positions in token_positions.items():
        frozen_positions = tuple(positions)
        score = _score(
            options.scoring_method,
            len(positions),
            len(all_tokens),
            len(term),
            avg_term_length,
            frozen_positions,
            total_positions,
        )
        keywords.append(
            KeywordTerm(
                term=term,
                score=score,
                frequency=len(positions),
                type="single",
                positions=frozen_positions,
            )
        )

    return _sort_by_score(keywords)[: options.max_keywords]


def extract_ngrams(tokens: list[str], n: int) -> list[str]:
    """Contiguous n-word sequences joined by single spaces."""
    if n <= 0 or len(tokens) < n:
        return []
    return [" ".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def extract_phrases(
    preprocessed: PreprocessedText,
    options: ExtractionOptions = DEFAULT_EXTRACTION_OPTIONS,
) -> list[KeywordTerm]:
    """Score multi-word phrases (n-grams) that recur or span three+ words."""
    all_tokens = _scoring_tokens(preprocessed, options.min_keyword_length)

    phrase_positions: dict[str, list[int]] = {}
    for n in range(options.min_phrase_words, options.max_phrase_words + 1):
        for index, phrase in enumerate(extract_ngrams(all_tokens, n)):
            if len(phrase) <= options.max_phrase_length:
                phrase_positions.setdefault(phrase, []).append(index)

    if not phrase_positions:
        return []

    avg_phrase_length = (
        sum(len(p) for p in phrase_positions) / len(phrase_positions) or 1.0
    )

    phrases = []
    for phrase, positions in phrase_positions.items():
        frequency = len(positions)
        if frequency <= 1 and len(phrase.split(" ")) < 3:
            continue

        frozen_positions = tuple(positions)
        score = _score(
            options.scoring_method,
            frequency,
            len(all_tokens),
            len(phrase),
            avg_phrase_length,
            frozen_positions,
            len(all_tokens),
        )
        if options.scoring_method == "weighted":
            score *= PHRASE_BOOST

        phrases.append(
            KeywordTerm(
                term=phrase,
                score=score,
                frequency=frequency,
                type="phrase",
                positions=frozen_positions,
            )
        )

    return _sort_by_score(phrases)[: options.max_phrases]


def extract_keywords_and_phrases(
    item: ItemContent,
    options: ExtractionOptions = DEFAULT_EXTRACTION_OPTIONS,
) -> KeywordExtractionResult:
    """Extract keywords and phrases and merge them, preferring phrases.

    Every word of a selected phrase is marked as covered, so single
    keywords already represented by a phrase are not repeated.
    """
    preprocessed = preprocess_action_text(
        item, remove_stopwords=True, min_token_length=3
    )

    keywords = extract_keywords(preprocessed, options)
    phrases = extract_phrases(preprocessed, options)

    combined: list[KeywordTerm] = []
    covered: set[str] = set()

    for phrase in phrases:
        combined.append(phrase)
        covered.add(phrase.term)
        covered.update(phrase.term.split(" "))

    for keyword in keywords:
        if keyword.term not in covered:
            combined.append(keyword)
            covered.add(keyword.term)

    all_tokens = preprocessed.ordered_tokens()
    metadata = ExtractionMetadata(
        total_tokens=len(all_tokens),
        unique_tokens=len(set(all_tokens)),
        avg_word_length=(
            sum(len(t) for t in all_tokens) / len(all_tokens) if all_tokens else 0.0
        ),
        total_phrases=len(phrases),
    )

    return KeywordExtractionResult(
        keywords=keywords,
        phrases=phrases,
        combined=_sort_by_score(combined),
        metadata=metadata,
    )


def get_important_terms(item: ItemContent, max_terms: int = 8) -> list[str]:
    """Top combined terms, split roughly 70/30 between keywords and phrases."""
    result = extract_keywords_and_phrases(
        item,
        replace(
            DEFAULT_EXTRACTION_OPTIONS,
            max_keywords=math.ceil(max_terms * 0.7),
            max_phrases=math.ceil(max_terms * 0.3),
        ),
    )
    return [keyword.term for keyword in result.combined[:max_terms]]


def calculate_weighted_overlap(
    keywords_a: list[KeywordTerm], keywords_b: list[KeywordTerm]
) -> float:
    """Shared-term overlap weighted by the geometric mean of term scores."""
    if not keywords_a or not keywords_b:
        return 0.0

    scores_a = {k.term: k.score for k in keywords_a}
    scores_b = {k.term: k.score for k in keywords_b}

    total_weight_a = sum(k.score for k in keywords_a)
    total_weight_b = sum(k.score for k in keywords_b)

    intersection = sum(
        math.sqrt(score_a * scores_b[term])
        for term, score_a in scores_a.items()
        if term in scores_b
    )

    avg_total_weight = (total_weight_a + total_weight_b) / 2
    return intersection / avg_total_weight if avg_total_weight > 0 else 0.0


def calculate_jaccard_similarity(
    keywords_a: list[KeywordTerm], keywords_b: list[KeywordTerm]
) -> float:
    terms_a = {k.term for k in keywords_a}
    terms_b = {k.term for k in keywords_b}
    union = terms_a | terms_b
    if not union:
        return 0.0
    return len(terms_a & terms_b) / len(union)


def calculate_phrase_similarity(
    phrases_a: list[KeywordTerm], phrases_b: list[KeywordTerm]
) -> float:
    if not phrases_a or not phrases_b:
        return 0.0
    shared = {p.term for p in phrases_a} & {p.term for p in phrases_b}
    return len(shared) / max(len(phrases_a), len(phrases_b))


def calculate_keyword_similarity(item_a: ItemContent, item_b: ItemContent) -> float:
    """Keyword similarity between two items in [0, 1].

    Combines weighted overlap (0.5), Jaccard over keyword sets (0.3) and
    phrase overlap (0.2). Identical inputs score high but not necessarily 1.0.
    """
    options = replace(DEFAULT_EXTRACTION_OPTIONS, max_keywords=20, max_phrases=8)
    result_a = extract_keywords_and_phrases(item_a, options)
    result_b = extract_keywords_and_phrases(item_b, options)

    if not result_a.keywords or not result_b.keywords:
        return 0.0

    weighted_overlap = calculate_weighted_overlap(result_a.keywords, result_b.keywords)
    jaccard = calculate_jaccard_similarity(result_a.keywords, result_b.keywords)
    phrase_overlap = calculate_phrase_similarity(result_a.phrases, result_b.phrases)

    combined = weighted_overlap * 0.5 + jaccard * 0.3 + phrase_overlap * 0.2
    return min(1.0, combined)
