"""
Prototype Vector Builder
Averages the embeddings of a seed word list into one vector for a semantic class.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .errors import EmptySeedSetError, MissingVectorError
from .lexicon_store import LexiconStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrototypeVector:
    """Mean vector of a seed set, e.g. verbs of pleading and confiding."""
    vector: np.ndarray
    seed_words: Tuple[str, ...]

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


def build_prototype(store: LexiconStore, seed_words: Sequence[str]) -> PrototypeVector:
    """
    Build the component-wise mean of the seed word vectors.

    Raises:
        EmptySeedSetError: if ``seed_words`` is empty
        MissingVectorError: naming the first seed word without a vector
    """
    seeds = tuple(seed_words)
    if not seeds:
        raise EmptySeedSetError()

    vectors = []
    for word in seeds:
        entry = store.get(word)
        if entry is None or entry.vector is None:
            raise MissingVectorError(word)
        vectors.append(entry.vector)

    mean = np.mean(np.vstack(vectors).astype(np.float64), axis=0)
    mean.setflags(write=False)
    logger.debug(f"Built prototype of dimension {mean.shape[0]} from {len(seeds)} seed words")
    return PrototypeVector(vector=mean, seed_words=seeds)


def save_prototype(prototype: PrototypeVector, path) -> None:
    """Write a prototype and its seed words to an ``.npz`` file."""
    np.savez(path, vector=prototype.vector, seed_words=np.array(prototype.seed_words, dtype=str))


def load_prototype(path) -> PrototypeVector:
    """Read a prototype written by ``save_prototype``."""
    with np.load(path, allow_pickle=False) as data:
        vector = np.array(data['vector'], dtype=np.float64)
        seeds = tuple(str(word) for word in data['seed_words'])
    vector.setflags(write=False)
    logger.info(f"Loaded cached prototype from {path} ({len(seeds)} seed words)")
    return PrototypeVector(vector=vector, seed_words=seeds)
