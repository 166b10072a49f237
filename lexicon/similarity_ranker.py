"""
Similarity Ranker
Cosine similarity between word vectors and ranking of the vocabulary against a query vector.

Ranking is an exact linear scan over every vector-bearing entry. Ties keep lexicon order,
and the parallel and streaming forms return exactly what the sequential scan returns.
"""

import heapq
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import DegenerateVectorError, MissingVectorError
from .lexicon_store import LexiconStore
from .prototype_builder import PrototypeVector

logger = logging.getLogger(__name__)

VectorLike = Union[np.ndarray, Sequence[float], PrototypeVector]

DEFAULT_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class _Scored:
    """Internal ranking record; ordering key is (-score, row)."""
    score: float
    row: int
    word: str

    @property
    def key(self) -> Tuple[float, int]:
        return (-self.score, self.row)


class SimilarityRanking:
    """Ordered ``(word, score)`` pairs, best first."""

    def __init__(self, items: Sequence[Tuple[str, float]], skipped: int = 0):
        self.items: Tuple[Tuple[str, float], ...] = tuple(items)
        self.skipped = skipped

    def words(self) -> List[str]:
        return [word for word, _ in self.items]

    def top(self, k: int) -> List[Tuple[str, float]]:
        return list(self.items[:k])

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SimilarityRanking):
            return NotImplemented
        return self.items == other.items and self.skipped == other.skipped

    def __repr__(self) -> str:
        return f"SimilarityRanking(size={len(self.items)}, skipped={self.skipped})"


def _as_vector(value: VectorLike) -> np.ndarray:
    if isinstance(value, PrototypeVector):
        value = value.vector
    vector = np.asarray(value, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"Expected a one-dimensional vector, got shape {vector.shape}")
    return vector


def _dot(a: np.ndarray, b: np.ndarray) -> float:
    # Elementwise product then sum, so equal inputs always reduce in the same order
    return float(np.multiply(a, b).sum())


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Calculate cosine similarity between two vectors.

    Returns a value in [-1, 1]. A zero-norm vector raises ``DegenerateVectorError``
    instead of producing NaN.
    """
    vec_a = _as_vector(a)
    vec_b = _as_vector(b)
    if vec_a.shape != vec_b.shape:
        raise ValueError(f"Vector shapes differ: {vec_a.shape} vs {vec_b.shape}")

    sq_a = _dot(vec_a, vec_a)
    sq_b = _dot(vec_b, vec_b)
    if sq_a == 0.0 or sq_b == 0.0:
        raise DegenerateVectorError()

    score = _dot(vec_a, vec_b) / float(np.sqrt(sq_a * sq_b))
    return max(-1.0, min(1.0, score))


def similarity(store: LexiconStore, word_a: str, word_b: str) -> float:
    """Direct pairwise similarity between two lexicon words."""
    vectors = []
    for word in (word_a, word_b):
        entry = store.get(word)
        if entry is None or entry.vector is None:
            raise MissingVectorError(word)
        if not np.any(entry.vector):
            raise DegenerateVectorError(f"Vector for '{word}' has zero norm", word=word)
        vectors.append(entry.vector)
    return cosine_similarity(vectors[0], vectors[1])


def _query_vector(store: LexiconStore, query: VectorLike) -> Tuple[np.ndarray, float]:
    vector = _as_vector(query)
    if store.dimension is not None and vector.shape[0] != store.dimension:
        raise ValueError(f"Query dimension {vector.shape[0]} does not match lexicon dimension {store.dimension}")
    sq_norm = _dot(vector, vector)
    if sq_norm == 0.0:
        raise DegenerateVectorError("Query vector has zero norm")
    return vector, sq_norm


def _score_rows(store: LexiconStore, start: int, stop: int,
                query: np.ndarray, query_sq_norm: float) -> Tuple[List[_Scored], int]:
    """Score rows ``start:stop``; zero-norm rows are left out and counted."""
    matrix = store.vector_matrix
    scored = []
    skipped = 0
    for block_start in range(start, stop, DEFAULT_CHUNK_SIZE):
        block = matrix[block_start:min(block_start + DEFAULT_CHUNK_SIZE, stop)]
        dots = np.multiply(block, query).sum(axis=1)
        sq_norms = np.multiply(block, block).sum(axis=1)

        for offset in range(block.shape[0]):
            row = block_start + offset
            sq_norm = float(sq_norms[offset])
            if sq_norm == 0.0:
                skipped += 1
                logger.debug(f"Skipping zero-norm vector for '{store.vector_word(row)}'")
                continue
            score = float(dots[offset]) / float(np.sqrt(sq_norm * query_sq_norm))
            score = max(-1.0, min(1.0, score))
            scored.append(_Scored(score=score, row=row, word=store.vector_word(row)))
    return scored, skipped


def _partitions(total: int, parts: int) -> List[Tuple[int, int]]:
    parts = max(1, min(parts, total)) if total else 1
    size, remainder = divmod(total, parts)
    bounds = []
    start = 0
    for index in range(parts):
        stop = start + size + (1 if index < remainder else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def rank_by_similarity(store: LexiconStore, query_vector: VectorLike,
                       workers: Optional[int] = None) -> SimilarityRanking:
    """
    Score every vector-bearing entry against ``query_vector`` and sort best first.

    Args:
        store: Loaded lexicon
        query_vector: Plain vector or ``PrototypeVector``
        workers: Number of threads to partition the vocabulary over. The merged
            result is identical to the single-threaded ranking.

    Returns:
        ``SimilarityRanking`` whose ``skipped`` counts zero-norm entries left out

    Raises:
        DegenerateVectorError: if the query vector has zero norm
    """
    query, query_sq_norm = _query_vector(store, query_vector)
    total = store.vector_matrix.shape[0]

    if not workers or workers <= 1 or total < 2:
        scored, skipped = _score_rows(store, 0, total, query, query_sq_norm)
        order = sorted(scored, key=lambda item: -item.score)
    else:
        bounds = _partitions(total, workers)
        with ThreadPoolExecutor(max_workers=len(bounds)) as executor:
            futures = [
                executor.submit(_score_rows, store, start, stop, query, query_sq_norm)
                for start, stop in bounds
            ]
            partials = [future.result() for future in futures]
        skipped = sum(count for _, count in partials)
        sorted_parts = [sorted(part, key=lambda item: item.key) for part, _ in partials]
        order = list(heapq.merge(*sorted_parts, key=lambda item: item.key))

    if skipped:
        logger.warning(f"Skipped {skipped} zero-norm vectors while ranking {total} entries")
    return SimilarityRanking([(item.word, item.score) for item in order], skipped=skipped)


def rank_by_word(store: LexiconStore, word: str, workers: Optional[int] = None) -> SimilarityRanking:
    """Rank the vocabulary against the vector of a single lexicon word."""
    entry = store.get(word)
    if entry is None or entry.vector is None:
        raise MissingVectorError(word)
    return rank_by_similarity(store, entry.vector, workers=workers)


class TopKSimilarity:
    """
    Lazy, restartable top-K ranking.

    The vocabulary is scanned chunk by chunk while only the best ``k`` records are
    kept, so the full ranking is never materialised. Each iteration starts a fresh
    scan and yields the same pairs as ``rank_by_similarity(...)[:k]``.
    """

    def __init__(self, store: LexiconStore, query_vector: VectorLike, k: int,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.store = store
        self.k = k
        self.chunk_size = chunk_size
        self._query, self._query_sq_norm = _query_vector(store, query_vector)

    def _scan(self) -> Tuple[List[_Scored], int]:
        total = self.store.vector_matrix.shape[0]
        best: List[_Scored] = []
        skipped = 0
        for start in range(0, total, self.chunk_size):
            stop = min(start + self.chunk_size, total)
            scored, chunk_skipped = _score_rows(self.store, start, stop, self._query, self._query_sq_norm)
            skipped += chunk_skipped
            best = heapq.nsmallest(self.k, best + scored, key=lambda item: item.key)
        return best, skipped

    def ranking(self) -> SimilarityRanking:
        """Run one scan and return the top ``k`` pairs with that scan's skipped count."""
        best, skipped = self._scan()
        return SimilarityRanking([(item.word, item.score) for item in best], skipped=skipped)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        best, _ = self._scan()
        for item in best:
            yield item.word, item.score
