"""
Lexical sentence extraction for prompt-driven reports.

This package picks the sentences of a document that best match a user prompt
using plain token-set overlap (Jaccard similarity). No language model and no
embeddings are involved: two words match only if they are the same token.

Components:
- tokenizer: Lowercase word tokens and token sets
- similarity: Jaccard similarity between two token sets
- ranker: Sentence splitting, scoring, threshold filtering and stable ordering
- report: Fixed-layout report text assembled from the ranked sentences

Every function here is pure: same input, same output, no shared state.
"""

from .tokenizer import tokenize, token_set
from .similarity import jaccard_similarity
from .ranker import (
    DEFAULT_THRESHOLD,
    ScoredSentence,
    filter_relevant,
    order_by_score,
    rank_sentences,
    score_sentences,
    split_sentences,
)
from .report import (
    NO_RESULTS_MESSAGE,
    REPORT_TITLE,
    assemble_report,
    format_timestamp,
    generate_report,
)

__all__ = [
    "tokenize",
    "token_set",
    "jaccard_similarity",
    "DEFAULT_THRESHOLD",
    "ScoredSentence",
    "split_sentences",
    "score_sentences",
    "filter_relevant",
    "order_by_score",
    "rank_sentences",
    "NO_RESULTS_MESSAGE",
    "REPORT_TITLE",
    "assemble_report",
    "format_timestamp",
    "generate_report",
]
