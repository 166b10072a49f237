"""
Frequency Ranker
Derives the log-probability boundary between common and rare words.
"""

import logging
import math
from typing import Optional

from .lexicon_store import LexiconStore

logger = logging.getLogger(__name__)

# A threshold of -inf means no word belongs to the common band
NO_COMMON_BAND = -math.inf


def rarity_threshold(store: LexiconStore, top_n: int) -> float:
    """
    Return the log-probability of the ``top_n``-th most frequent word.

    Log-probabilities are sorted ascending (rarest first, stable for ties) and the
    value at position ``len - top_n`` is returned. Words below that value are rare.

    Args:
        store: Loaded lexicon
        top_n: Number of most frequent words to treat as common, e.g. 1000

    Returns:
        The threshold, or ``-inf`` when ``top_n`` covers the whole vocabulary
    """
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise ValueError(f"top_n must be a positive integer, got {top_n!r}")

    probs = sorted(entry.log_prob for entry in store.all_entries())
    if top_n >= len(probs):
        logger.debug(f"top_n={top_n} covers the whole vocabulary ({len(probs)} words); "
                     f"rarity filter disabled")
        return NO_COMMON_BAND

    threshold = probs[len(probs) - top_n]
    logger.debug(f"Rarity threshold for top {top_n} of {len(probs)} words: {threshold}")
    return threshold


def is_rare(log_prob: Optional[float], threshold: float) -> bool:
    """Whether a word with ``log_prob`` falls outside the common band.

    Unknown words (``log_prob is None``) are always rare.
    """
    if log_prob is None or threshold == NO_COMMON_BAND:
        return True
    return log_prob < threshold
