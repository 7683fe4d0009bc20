"""
Tokenizer for lexical sentence matching.

Tokenization pipeline:
1. Lowercase conversion
2. Extract maximal runs of ASCII word characters ([A-Za-z0-9_])
3. Return tokens in document order (duplicates kept)

Everything that is not a word character acts as a separator and is dropped.
There is no stopword list and no stemming: matching is exact token equality.
"""

import re
from typing import FrozenSet, List

WORD_PATTERN = re.compile(r'\w+', re.ASCII)


def tokenize(text: str) -> List[str]:
    """
    Split text into lowercase word tokens.

    Args:
        text: Input text (any string, may be empty)

    Returns:
        List of lowercase tokens in the order they appear.
        Duplicates are preserved; collapse them with token_set().

    Examples:
        >>> tokenize("Hello, World! 123")
        ['hello', 'world', '123']

        >>> tokenize("snake_case stays whole")
        ['snake_case', 'stays', 'whole']

        >>> tokenize("  ... !!! ")
        []
    """
    if not text:
        return []

    return WORD_PATTERN.findall(text.lower())


def token_set(text: str) -> FrozenSet[str]:
    """
    Unique tokens of text (order-free, duplicates collapsed).

    Examples:
        >>> sorted(token_set("The cat saw the cat"))
        ['cat', 'saw', 'the']

        >>> token_set("")
        frozenset()
    """
    return frozenset(tokenize(text))
