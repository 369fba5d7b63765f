"""Weighted keyword search over workouts.

Text is split into casefolded Unicode alphanumeric words, English stop words
are removed and the rest are reduced to their English Snowball stems, so
``run``, ``runs`` and ``running`` are the same term. A leading ``-`` marks a
word as negated. A workout matches when any positive term occurs in one of its
searchable fields and no negated term occurs in any of them. The score sums,
per field, the field weight times the number of positive-term occurrences.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import snowballstemmer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from workout_tracker.models.workout import Workout


FIELD_WEIGHTS: dict[str, int] = {
    "title": 3,
    "category": 2,
    "description": 1,
    "notes": 1,
}

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "am", "an",
        "and", "any", "are", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "could", "did",
        "do", "does", "doing", "down", "during", "each", "few", "for", "from",
        "further", "had", "has", "have", "having", "he", "her", "here", "hers",
        "herself", "him", "himself", "his", "how", "i", "if", "in", "into",
        "is", "it", "its", "itself", "just", "me", "more", "most", "my",
        "myself", "no", "nor", "not", "now", "of", "off", "on", "once", "only",
        "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same",
        "she", "should", "so", "some", "such", "than", "that", "the", "their",
        "theirs", "them", "themselves", "then", "there", "these", "they",
        "this", "those", "through", "to", "too", "under", "until", "up", "very",
        "was", "we", "were", "what", "when", "where", "which", "while", "who",
        "whom", "why", "will", "with", "would", "you", "your", "yours",
        "yourself", "yourselves",
    }
)  # fmt: skip

_WORD_RE = re.compile(r"[^\W_]+")

_stemmer = snowballstemmer.stemmer("english")


def tokenize(text: str | None) -> list[str]:
    """Split text into casefolded words, without stop words.

    Examples:
        >>> tokenize("Morning Run in the park")
        ['morning', 'run', 'park']
    """
    if not text:
        return []
    return [word for word in _WORD_RE.findall(text.casefold()) if word not in STOP_WORDS]


def stem_terms(text: str | None) -> list[str]:
    """Searchable terms of ``text``: its words reduced to their stems.

    Examples:
        >>> stem_terms("Running, runs and run")
        ['run', 'run', 'run']
    """
    return _stemmer.stemWords(tokenize(text))


def index_text(workout: Workout) -> str:
    """Distinct stems of every searchable field, space delimited on both ends.

    Stored on the workout so the store can prefilter candidates with an exact
    ``" term "`` substring match.
    """
    terms = {term for field in FIELD_WEIGHTS for term in stem_terms(getattr(workout, field))}
    return f" {' '.join(sorted(terms))} "


@dataclass(frozen=True)
class SearchQuery:
    """A parsed search query."""

    positive: tuple[str, ...] = ()
    negative: tuple[str, ...] = ()
    blank: bool = True

    @property
    def searchable(self) -> bool:
        return bool(self.positive)


def parse_query(query: str | None) -> SearchQuery:
    """Parse a raw query string into positive and negated terms.

    Examples:
        >>> parse_query("yoga -hot")
        SearchQuery(positive=('yoga',), negative=('hot',), blank=False)
    """
    if query is None or not query.strip():
        return SearchQuery()

    positive: list[str] = []
    negative: list[str] = []
    for word in query.split():
        if word.startswith("-") and len(word) > 1:
            target = negative
            word = word[1:]
        else:
            target = positive
        for term in stem_terms(word):
            if term not in target:
                target.append(term)

    return SearchQuery(positive=tuple(positive), negative=tuple(negative), blank=False)


def _field_tokens(workout: Workout) -> dict[str, list[str]]:
    return {field: stem_terms(getattr(workout, field)) for field in FIELD_WEIGHTS}


def score_workout(workout: Workout, query: SearchQuery) -> int:
    """Relevance of ``workout`` for ``query``; 0 means no match."""
    tokens = _field_tokens(workout)

    for words in tokens.values():
        if any(term in words for term in query.negative):
            return 0

    score = 0
    for field, words in tokens.items():
        occurrences = sum(words.count(term) for term in query.positive)
        score += FIELD_WEIGHTS[field] * occurrences
    return score


def rank_workouts(
    workouts: Iterable[Workout],
    query: SearchQuery,
    by_relevance: bool = True,
) -> list[Workout]:
    """Keep the workouts matching ``query`` in result order.

    Ordered by score descending, then date descending, then id ascending.
    With ``by_relevance=False`` the score is ignored for ordering.
    """
    scored = [(score_workout(w, query), w) for w in workouts]
    matches = [(score, w) for score, w in scored if score > 0]

    # Stable sorts, least significant key first
    matches.sort(key=lambda pair: pair[1].id)
    matches.sort(key=lambda pair: pair[1].date, reverse=True)
    if by_relevance:
        matches.sort(key=lambda pair: pair[0], reverse=True)
    return [w for _, w in matches]


__all__ = [
    "FIELD_WEIGHTS",
    "STOP_WORDS",
    "SearchQuery",
    "index_text",
    "parse_query",
    "rank_workouts",
    "score_workout",
    "stem_terms",
    "tokenize",
]
