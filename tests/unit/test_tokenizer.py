"""
Unit tests for the extraction tokenizer.
"""

import pytest
from prompt_report.extraction.tokenizer import tokenize, token_set


class TestTokenize:
    """Test word token extraction"""

    def test_basic_tokenization(self):
        """Punctuation is dropped, case is folded, order is kept"""
        assert tokenize("Hello, World! 123") == ["hello", "world", "123"]

    def test_duplicates_kept(self):
        """Duplicates survive tokenization (they collapse only in token_set)"""
        assert tokenize("the cat and the hat") == ["the", "cat", "and", "the", "hat"]

    def test_underscore_is_word_character(self):
        """Underscore joins a token, hyphen and apostrophe split it"""
        assert tokenize("snake_case") == ["snake_case"]
        assert tokenize("blue-green") == ["blue", "green"]
        assert tokenize("don't") == ["don", "t"]

    def test_numbers_kept(self):
        """Numbers are ordinary tokens; the decimal point splits them"""
        assert tokenize("Python 3.11") == ["python", "3", "11"]

    def test_non_ascii_letters_are_separators(self):
        """Only [A-Za-z0-9_] counts as a word character"""
        assert tokenize("café au lait") == ["caf", "au", "lait"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", "...!?", "«»"])
    def test_no_word_characters(self, text):
        """Text without word characters gives an empty list"""
        assert tokenize(text) == []


class TestTokenSet:
    """Test token set construction"""

    def test_duplicates_collapse(self):
        assert token_set("The cat saw THE cat") == frozenset({"the", "cat", "saw"})

    def test_empty(self):
        assert token_set("") == frozenset()

    def test_order_free(self):
        assert token_set("b a c") == token_set("c b a")
