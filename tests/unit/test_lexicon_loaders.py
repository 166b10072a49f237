"""
Unit Tests for Lexicon Loaders
Tests reading probability tables, word2vec text vectors and spaCy vocabularies.
"""

import json

import numpy as np
import pytest

from lexicon import (
    DEFAULT_OOV_LOG_PROB, LoadError, is_rare, load_from_files, load_from_spacy_vocab,
    load_probability_table, load_vector_table, rarity_threshold
)

try:
    from spacy.vocab import Vocab
    SPACY_AVAILABLE = True
except ImportError:
    SPACY_AVAILABLE = False


@pytest.mark.unit
class TestProbabilityTables:
    """Probability tables in JSON and YAML."""

    def test_json_table(self, tmp_path):
        path = tmp_path / 'probs.json'
        path.write_text(json.dumps({'back': -7.40, 'not': -5.41}), encoding='utf-8')
        assert load_probability_table(path) == {'back': -7.40, 'not': -5.41}

    def test_yaml_table(self, tmp_path):
        path = tmp_path / 'probs.yaml'
        path.write_text("quietly: -11.07\nback: -7.4\n", encoding='utf-8')
        assert load_probability_table(path) == {'quietly': -11.07, 'back': -7.4}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / 'probs.yaml'
        path.write_text("- back\n- not\n", encoding='utf-8')
        with pytest.raises(LoadError):
            load_probability_table(path)

    def test_non_numeric_probability_rejected(self, tmp_path):
        path = tmp_path / 'probs.json'
        path.write_text(json.dumps({'back': 'often'}), encoding='utf-8')
        with pytest.raises(LoadError) as excinfo:
            load_probability_table(path)
        assert excinfo.value.word == 'back'

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError):
            load_probability_table(tmp_path / 'absent.json')


@pytest.mark.unit
class TestVectorTables:
    """Vectors in word2vec text format."""

    def test_header_is_skipped(self, tmp_path):
        path = tmp_path / 'vectors.txt'
        path.write_text("2 3\npleaded 1.0 0.1 0.0\nbegged 0.95 0.15 0.05\n", encoding='utf-8')
        table = load_vector_table(path)
        assert list(table) == ['pleaded', 'begged']
        assert table['begged'] == [0.95, 0.15, 0.05]

    def test_without_header(self, tmp_path):
        path = tmp_path / 'vectors.txt'
        path.write_text("pleaded 1.0 0.1 0.0\n\n", encoding='utf-8')
        assert load_vector_table(path) == {'pleaded': [1.0, 0.1, 0.0]}

    def test_malformed_line(self, tmp_path):
        path = tmp_path / 'vectors.txt'
        path.write_text("pleaded 1.0 0.1 0.0\nbegged 0.95 x 0.05\n", encoding='utf-8')
        with pytest.raises(LoadError) as excinfo:
            load_vector_table(path)
        assert 'line 2' in str(excinfo.value)

    def test_load_from_files_checks_dimensions(self, tmp_path):
        probs = tmp_path / 'probs.json'
        probs.write_text(json.dumps({'pleaded': -12.0, 'begged': -12.5}), encoding='utf-8')
        vectors = tmp_path / 'vectors.txt'
        vectors.write_text("pleaded 1.0 0.1 0.0\nbegged 0.95 0.15\n", encoding='utf-8')
        with pytest.raises(LoadError):
            load_from_files(probs, vectors)

    def test_load_from_files(self, tmp_path):
        probs = tmp_path / 'probs.json'
        probs.write_text(json.dumps({'pleaded': -12.0, 'the': -3.0}), encoding='utf-8')
        vectors = tmp_path / 'vectors.txt'
        vectors.write_text("pleaded 1.0 0.1 0.0\n", encoding='utf-8')
        store = load_from_files(probs, vectors)
        assert store.dimension == 3
        assert store.has_vector('pleaded')
        assert not store.has_vector('the')


def vocab_with_vectors():
    vocab = Vocab()
    vocab.set_vector('pleaded', np.array([1.0, 0.1, 0.0], dtype='float32'))
    vocab.set_vector('begged', np.array([0.95, 0.15, 0.05], dtype='float32'))
    for word in ('the', 'back', 'abjectly'):
        vocab[word]
    return vocab


@pytest.mark.unit
@pytest.mark.skipif(not SPACY_AVAILABLE, reason="spaCy not available")
class TestSpacyVocab:
    """Building a store from a spaCy vocabulary."""

    def test_probabilities_from_lookups_table(self):
        vocab = vocab_with_vectors()
        vocab.lookups.add_table('lexeme_prob', {'the': -3.0, 'back': -7.4, 'pleaded': -12.0, 'abjectly': -15.2})

        store = load_from_spacy_vocab(vocab)

        assert store.dimension == 3
        assert store.has_vector('pleaded')
        assert not store.has_vector('the')
        assert store.lookup('back').log_prob == pytest.approx(-7.4)
        assert store.lookup('begged').log_prob == DEFAULT_OOV_LOG_PROB
        np.testing.assert_allclose(store.lookup('begged').vector, [0.95, 0.15, 0.05], rtol=1e-6)

    def test_frequencies_separate_common_from_rare(self):
        vocab = vocab_with_vectors()
        vocab.lookups.add_table('lexeme_prob', {'the': -3.0, 'back': -7.4, 'pleaded': -12.0, 'abjectly': -15.2})

        store = load_from_spacy_vocab(vocab)
        threshold = rarity_threshold(store, 2)

        assert len({entry.log_prob for entry in store.all_entries()}) == 5
        assert threshold == pytest.approx(-7.4)
        assert not is_rare(store.lookup('back').log_prob, threshold)
        assert is_rare(store.lookup('abjectly').log_prob, threshold)

    def test_explicit_probability_table(self):
        vocab = vocab_with_vectors()
        store = load_from_spacy_vocab(vocab, probability_table={'the': -3.0, 'quietly': -11.07})

        assert store.lookup('quietly').log_prob == pytest.approx(-11.07)
        assert store.lookup('pleaded').log_prob == DEFAULT_OOV_LOG_PROB
        assert 'back' not in store

    def test_vocab_without_frequencies_rejected(self):
        with pytest.raises(LoadError):
            load_from_spacy_vocab(vocab_with_vectors())
