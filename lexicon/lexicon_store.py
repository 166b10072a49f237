"""
Lexicon Store
Read-only table of word log-probabilities and optional word vectors.

The store is populated once by ``load`` and never mutated afterwards, so a single
instance can be shared by every rule, ranker and worker thread without locking.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from .errors import LoadError, WordNotFoundError

logger = logging.getLogger(__name__)

# spaCy assigns this probability to lexemes it has no frequency data for
DEFAULT_OOV_LOG_PROB = -20.0


@dataclass(frozen=True)
class LexiconEntry:
    """A single word with its corpus log-probability and optional embedding."""
    word: str
    log_prob: float
    vector: Optional[np.ndarray] = None

    @property
    def has_vector(self) -> bool:
        return self.vector is not None


class LexiconStore:
    """
    Immutable lexicon shared by reference.

    Entries keep the order they were loaded in (probability table first, then
    words that only have a vector). Vector-bearing entries are also packed into
    a row matrix in the same order for bulk similarity scoring.
    """

    def __init__(self, entries: Sequence[LexiconEntry], dimension: Optional[int] = None):
        self._entries: Dict[str, LexiconEntry] = {}
        for entry in entries:
            self._entries[entry.word] = entry
        self._view = MappingProxyType(self._entries)
        self.dimension = dimension

        vector_entries = [entry for entry in self._entries.values() if entry.vector is not None]
        self._vector_words: List[str] = [entry.word for entry in vector_entries]
        if vector_entries:
            matrix = np.vstack([entry.vector for entry in vector_entries]).astype(np.float64)
        else:
            matrix = np.zeros((0, dimension or 0), dtype=np.float64)
        matrix.setflags(write=False)
        self._matrix = matrix

    # === LOOKUPS ===

    def lookup(self, word: str) -> LexiconEntry:
        """Return the entry for ``word`` or raise ``WordNotFoundError``."""
        try:
            return self._entries[word]
        except KeyError:
            raise WordNotFoundError(word) from None

    def get(self, word: str) -> Optional[LexiconEntry]:
        """Return the entry for ``word`` or ``None`` when it is unknown."""
        return self._entries.get(word)

    def has_vector(self, word: str) -> bool:
        entry = self._entries.get(word)
        return entry is not None and entry.vector is not None

    def all_entries(self) -> Iterator[LexiconEntry]:
        """Iterate all entries in stable load order."""
        return iter(self._view.values())

    @property
    def entries(self) -> Mapping[str, LexiconEntry]:
        return self._view

    # === BULK ACCESS FOR RANKING ===

    @property
    def vector_words(self) -> List[str]:
        """Words with vectors, in the row order of ``vector_matrix``."""
        return list(self._vector_words)

    def vector_word(self, row: int) -> str:
        """Word for row ``row`` of ``vector_matrix``."""
        return self._vector_words[row]

    @property
    def vector_matrix(self) -> np.ndarray:
        """Read-only ``(V, D)`` matrix of all vectors in lexicon order."""
        return self._matrix

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (f"LexiconStore(words={len(self._entries)}, vectors={len(self._vector_words)}, "
                f"dimension={self.dimension})")


def _freeze_vector(word: str, values, expected_dim: Optional[int]) -> np.ndarray:
    vector = np.array(values, dtype=np.float32)
    if vector.ndim != 1 or vector.size == 0:
        raise LoadError(
            f"Vector for '{word}' must be a non-empty one-dimensional sequence, got shape {vector.shape}",
            word=word, expected=expected_dim, actual=int(vector.size)
        )
    if expected_dim is not None and vector.shape[0] != expected_dim:
        raise LoadError(
            f"Vector dimension mismatch for '{word}': expected {expected_dim}, got {vector.shape[0]}",
            word=word, expected=expected_dim, actual=int(vector.shape[0])
        )
    vector.setflags(write=False)
    return vector


def load(word_probability_table: Mapping[str, float],
         word_vector_table: Optional[Mapping[str, Sequence[float]]] = None,
         oov_log_prob: float = DEFAULT_OOV_LOG_PROB) -> LexiconStore:
    """
    Build a ``LexiconStore`` from a probability table and a vector table.

    Args:
        word_probability_table: word -> log-probability
        word_vector_table: word -> embedding; every vector must share one dimension
        oov_log_prob: log-probability given to words that only appear in the vector table

    Returns:
        A fully populated, immutable store

    Raises:
        LoadError: if the vectors disagree on their dimension. Nothing is returned
            in that case, the load never succeeds partially.
    """
    word_vector_table = word_vector_table or {}

    dimension: Optional[int] = None
    vectors: Dict[str, np.ndarray] = {}
    for word, values in word_vector_table.items():
        vector = _freeze_vector(word, values, dimension)
        if dimension is None:
            dimension = int(vector.shape[0])
        vectors[word] = vector

    entries: List[LexiconEntry] = []
    for word, log_prob in word_probability_table.items():
        entries.append(LexiconEntry(word=word, log_prob=float(log_prob), vector=vectors.get(word)))

    vector_only = [word for word in vectors if word not in word_probability_table]
    for word in vector_only:
        entries.append(LexiconEntry(word=word, log_prob=float(oov_log_prob), vector=vectors[word]))

    if vector_only:
        logger.debug(f"{len(vector_only)} words have a vector but no probability; "
                     f"assigned log-probability {oov_log_prob}")

    store = LexiconStore(entries, dimension=dimension)
    logger.info(f"Loaded lexicon with {len(store)} words ({len(vectors)} vectors, dimension={dimension})")
    return store
