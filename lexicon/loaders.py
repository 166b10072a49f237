"""
Lexicon Loaders
Read probability and vector tables from disk or from a spaCy vocabulary.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml

from .errors import LoadError
from .lexicon_store import DEFAULT_OOV_LOG_PROB, LexiconStore, load

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# spaCy lookups table holding word log-probabilities
PROBABILITY_TABLE = 'lexeme_prob'


def load_probability_table(path: PathLike) -> Dict[str, float]:
    """Load a word -> log-probability mapping from a JSON or YAML file."""
    file_path = Path(path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if file_path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise LoadError(f"Failed to read probability table {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise LoadError(f"Probability table {file_path} is not a mapping")

    table = {}
    for word, value in data.items():
        try:
            table[str(word)] = float(value)
        except (TypeError, ValueError):
            raise LoadError(f"Invalid log-probability for '{word}' in {file_path}: {value!r}", word=str(word))
    logger.info(f"Loaded {len(table)} word probabilities from {file_path}")
    return table


def _is_header_line(parts: List[str]) -> bool:
    return len(parts) == 2 and all(part.isdigit() for part in parts)


def load_vector_table(path: PathLike) -> Dict[str, List[float]]:
    """
    Load vectors in word2vec text format.

    The optional first line ``<count> <dim>`` is skipped; every other non-empty line
    holds a word followed by its components. Dimension checks happen in ``load``.
    """
    file_path = Path(path)
    table: Dict[str, List[float]] = {}
    try:
        with open(file_path, 'r', encoding='utf-8') as handle:
            for line_number, line in enumerate(handle, start=1):
                parts = line.rstrip().split(' ')
                if not parts or not parts[0]:
                    continue
                if line_number == 1 and _is_header_line(parts):
                    continue
                word, values = parts[0], parts[1:]
                try:
                    table[word] = [float(value) for value in values]
                except ValueError:
                    raise LoadError(f"Malformed vector on line {line_number} of {file_path}", word=word)
    except OSError as e:
        raise LoadError(f"Failed to read vector table {file_path}: {e}") from e
    logger.info(f"Loaded {len(table)} word vectors from {file_path}")
    return table


def load_from_files(probability_path: PathLike, vector_path: Optional[PathLike] = None,
                    oov_log_prob: float = DEFAULT_OOV_LOG_PROB) -> LexiconStore:
    probabilities = load_probability_table(probability_path)
    vectors = load_vector_table(vector_path) if vector_path else {}
    return load(probabilities, vectors, oov_log_prob=oov_log_prob)


def _lookups_probability_table(vocab):
    """The ``lexeme_prob`` table on the vocab, or the one shipped in spacy-lookups-data."""
    if vocab.lookups.has_table(PROBABILITY_TABLE):
        return vocab.lookups.get_table(PROBABILITY_TABLE)
    try:
        from spacy.lookups import load_lookups
        lookups = load_lookups(vocab.lang, [PROBABILITY_TABLE], strict=False)
    except (ImportError, OSError, ValueError) as e:
        logger.debug(f"No '{PROBABILITY_TABLE}' lookups for language '{vocab.lang}': {e}")
        return None
    if lookups.has_table(PROBABILITY_TABLE):
        return lookups.get_table(PROBABILITY_TABLE)
    return None


def load_from_spacy_vocab(vocab, oov_log_prob: float = DEFAULT_OOV_LOG_PROB,
                          probability_table: Optional[Mapping[str, float]] = None) -> LexiconStore:
    """
    Build a store from a spaCy ``Vocab``.

    Vectors come from ``vocab.vectors`` keyed by string hash. Probabilities come from
    ``probability_table`` when given (every word in it is kept), otherwise from the
    ``lexeme_prob`` lookups table for the vocabulary's lexemes and vector words.
    ``Lexeme.prob`` is not used: without that table it is the same default for every word.

    Raises:
        LoadError: if none of the words has a probability
    """
    vectors: Dict[str, List[float]] = {}
    key2row = getattr(vocab.vectors, 'key2row', {}) or {}
    data = vocab.vectors.data
    for key, row in key2row.items():
        try:
            word = vocab.strings[key]
        except KeyError:
            continue
        vectors[word] = data[row]

    words = list(dict.fromkeys([lexeme.orth_ for lexeme in vocab] + list(vectors)))

    probabilities: Dict[str, float] = {}
    if probability_table is not None:
        probabilities.update((str(word), float(value)) for word, value in probability_table.items())
    else:
        table = _lookups_probability_table(vocab)
        if table is not None:
            for word in words:
                value = table.get(word)
                if value is not None:
                    probabilities[word] = float(value)

    if words and not probabilities:
        raise LoadError(
            f"No word frequencies for the spaCy vocabulary ({len(words)} words). "
            f"Install spacy-lookups-data or set LEXICON_PROBABILITY_FILE."
        )
    if len(probabilities) > 1 and len(set(probabilities.values())) == 1:
        logger.warning(f"All {len(probabilities)} word probabilities are equal; rarity cannot separate words")

    logger.info(f"Read {len(probabilities)} word probabilities and {len(vectors)} vectors from spaCy vocab")
    return load(probabilities, vectors, oov_log_prob=oov_log_prob)
