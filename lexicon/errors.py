"""
Lexicon Errors
Exception hierarchy shared by the lexicon store, the rankers and the prototype builder.
"""

from typing import Optional


class LexiconError(Exception):
    """Base class for all lexicon engine errors."""


class WordNotFoundError(LexiconError, KeyError):
    """Raised when a word is absent from the lexicon."""

    def __init__(self, word: str):
        super().__init__(word)
        self.word = word

    def __str__(self) -> str:
        return f"Word not found in lexicon: '{self.word}'"


class MissingVectorError(LexiconError):
    """Raised when a word that must carry an embedding has none."""

    def __init__(self, word: str):
        super().__init__(f"No vector available for word: '{word}'")
        self.word = word


class DegenerateVectorError(LexiconError, ValueError):
    """Raised when a zero-norm vector takes part in a similarity computation."""

    def __init__(self, message: str = "Cosine similarity is undefined for a zero-norm vector",
                 word: Optional[str] = None):
        super().__init__(message)
        self.word = word


class EmptySeedSetError(LexiconError, ValueError):
    """Raised when a prototype is requested from an empty seed list."""

    def __init__(self):
        super().__init__("Cannot build a prototype vector from an empty seed list")


class LoadError(LexiconError):
    """Raised when the lexicon tables cannot be loaded consistently."""

    def __init__(self, message: str, word: Optional[str] = None,
                 expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message)
        self.word = word
        self.expected = expected
        self.actual = actual
