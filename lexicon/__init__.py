"""
Lexicon Engine
Word statistics, prototype vectors and similarity ranking used by the adverb style rule.
"""

from .errors import (
    LexiconError, WordNotFoundError, MissingVectorError,
    DegenerateVectorError, EmptySeedSetError, LoadError
)
from .lexicon_store import LexiconEntry, LexiconStore, load, DEFAULT_OOV_LOG_PROB
from .frequency_ranker import rarity_threshold, is_rare, NO_COMMON_BAND
from .prototype_builder import PrototypeVector, build_prototype, save_prototype, load_prototype
from .similarity_ranker import (
    SimilarityRanking, TopKSimilarity, cosine_similarity,
    similarity, rank_by_similarity, rank_by_word
)
from .loaders import load_probability_table, load_vector_table, load_from_files, load_from_spacy_vocab

__all__ = [
    'LexiconError', 'WordNotFoundError', 'MissingVectorError',
    'DegenerateVectorError', 'EmptySeedSetError', 'LoadError',
    'LexiconEntry', 'LexiconStore', 'load', 'DEFAULT_OOV_LOG_PROB',
    'rarity_threshold', 'is_rare', 'NO_COMMON_BAND',
    'PrototypeVector', 'build_prototype', 'save_prototype', 'load_prototype',
    'SimilarityRanking', 'TopKSimilarity', 'cosine_similarity',
    'similarity', 'rank_by_similarity', 'rank_by_word',
    'load_probability_table', 'load_vector_table', 'load_from_files', 'load_from_spacy_vocab',
]
