"""
Sentence ranking by lexical overlap with a prompt.

Pipeline (each stage is a separate function so it can be tested alone):
1. split_sentences: cut the document after '.', '?' or '!' followed by whitespace
2. score_sentences: Jaccard similarity of each sentence's token set vs the query's
3. filter_relevant: keep scores strictly above the threshold (default 0.1)
4. order_by_score: stable sort by score, descending (ties keep document order)

An empty result is the "no results" outcome, not an error. Nothing in this
module raises for string input: empty documents and empty queries simply
produce no relevant sentences.

Known limitation: the boundary rule splits after abbreviations ("e.g. this")
and can never split a terminator that is not followed by whitespace.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import AbstractSet, Iterable, List, NamedTuple, Optional, Sequence

from .similarity import jaccard_similarity
from .tokenizer import token_set

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.1

# Terminator stays on the left piece, the whitespace run is the delimiter
SENTENCE_BOUNDARY = re.compile(r'(?<=[.?!])\s+')


class ScoredSentence(NamedTuple):
    """Sentence text (original casing and punctuation) with its similarity to the query"""
    sentence: str
    similarity: float


def split_sentences(text: str) -> List[str]:
    """
    Split document text into sentence candidates.

    Args:
        text: Full extracted document text

    Returns:
        Sentence candidates in document order. Empty or whitespace-only
        fragments are kept; they score 0 and fall out at the threshold.

    Examples:
        >>> split_sentences("The cat sat. The cat ran. Dogs bark.")
        ['The cat sat.', 'The cat ran.', 'Dogs bark.']

        >>> split_sentences("Really?!  Yes.")
        ['Really?!', 'Yes.']

        >>> split_sentences("")
        []
    """
    if not text:
        return []

    return SENTENCE_BOUNDARY.split(text)


def _score_one(sentence: str, query_tokens: AbstractSet[str]) -> ScoredSentence:
    return ScoredSentence(sentence, jaccard_similarity(query_tokens, token_set(sentence)))


def score_sentences(
    sentences: Sequence[str],
    query: str,
    max_workers: Optional[int] = None
) -> List[ScoredSentence]:
    """
    Score every sentence against the query.

    The query token set is built once. Sentences are independent, so with
    max_workers > 1 the scoring is scattered over a thread pool; results are
    gathered back in input order (Executor.map preserves it) so the later
    stable sort still sees document order.

    Args:
        sentences: Sentence candidates in document order
        query: User prompt
        max_workers: Thread count for scoring (None or 1 = run inline)

    Returns:
        One ScoredSentence per input sentence, same order as input
    """
    query_tokens = token_set(query)

    if max_workers and max_workers > 1 and len(sentences) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(
                lambda sentence: _score_one(sentence, query_tokens),
                sentences
            ))

    return [_score_one(sentence, query_tokens) for sentence in sentences]


def filter_relevant(
    scored: Iterable[ScoredSentence],
    threshold: float = DEFAULT_THRESHOLD
) -> List[ScoredSentence]:
    """Keep sentences whose similarity is strictly greater than threshold."""
    return [item for item in scored if item.similarity > threshold]


def order_by_score(scored: Iterable[ScoredSentence]) -> List[ScoredSentence]:
    """
    Sort by similarity, highest first.

    sorted() is stable and stays stable with reverse=True, so equal scores
    keep the order they had in the document.
    """
    return sorted(scored, key=lambda item: item.similarity, reverse=True)


def rank_sentences(
    document_text: str,
    query: str,
    threshold: float = DEFAULT_THRESHOLD,
    max_workers: Optional[int] = None
) -> List[ScoredSentence]:
    """
    Find the sentences of a document most relevant to a query.

    Args:
        document_text: Full extracted document text
        query: User prompt (used verbatim; trim it before calling)
        threshold: Minimum similarity, exclusive (default: 0.1)
        max_workers: Optional thread count for per-sentence scoring

    Returns:
        Relevant sentences, highest similarity first, ties in document order.
        An empty list means no sentence matched.

    Example:
        >>> ranked = rank_sentences("The cat sat. The cat ran. Dogs bark.", "cat")
        >>> [item.sentence for item in ranked]
        ['The cat sat.', 'The cat ran.']
    """
    sentences = split_sentences(document_text)
    scored = score_sentences(sentences, query, max_workers=max_workers)
    relevant = order_by_score(filter_relevant(scored, threshold))

    logger.debug(
        f"Ranked {len(sentences)} sentences: {len(relevant)} above threshold {threshold}"
    )

    return relevant
