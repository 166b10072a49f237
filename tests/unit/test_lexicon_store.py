"""
Unit tests for the Lexicon Store.

Tests loading, lookups, stable iteration order, immutability and
atomic failure on inconsistent vector dimensions.
"""

import unittest

import numpy as np

from lexicon import LexiconStore, LexiconEntry, LoadError, WordNotFoundError, load


class TestLexiconStoreLookups(unittest.TestCase):
    """Test lookups on a small loaded store."""

    def setUp(self):
        self.store = load(
            {'back': -7.40, 'not': -5.41, 'quietly': -11.07},
            {'back': [0.1, 0.2, 0.3], 'quietly': [0.3, 0.2, 0.1], 'murmured': [1.0, 0.0, 0.0]},
        )

    def test_lookup_known_word(self):
        entry = self.store.lookup('quietly')
        self.assertIsInstance(entry, LexiconEntry)
        self.assertEqual(entry.log_prob, -11.07)
        self.assertTrue(entry.has_vector)

    def test_lookup_unknown_word_raises_not_found(self):
        with self.assertRaises(WordNotFoundError) as ctx:
            self.store.lookup('abjectly')
        self.assertEqual(ctx.exception.word, 'abjectly')
        # NotFound is a KeyError so dict-style callers can handle it
        self.assertIsInstance(ctx.exception, KeyError)

    def test_get_unknown_word_returns_none(self):
        self.assertIsNone(self.store.get('abjectly'))

    def test_has_vector(self):
        self.assertTrue(self.store.has_vector('back'))
        self.assertFalse(self.store.has_vector('not'))
        self.assertFalse(self.store.has_vector('abjectly'))

    def test_vector_only_word_gets_oov_probability(self):
        entry = self.store.lookup('murmured')
        self.assertEqual(entry.log_prob, -20.0)

    def test_all_entries_keeps_load_order(self):
        words = [entry.word for entry in self.store.all_entries()]
        self.assertEqual(words, ['back', 'not', 'quietly', 'murmured'])
        # Iteration order is stable across calls
        self.assertEqual(words, [entry.word for entry in self.store.all_entries()])

    def test_dimension_and_len(self):
        self.assertEqual(self.store.dimension, 3)
        self.assertEqual(len(self.store), 4)
        self.assertIn('not', self.store)

    def test_vector_matrix_rows_follow_lexicon_order(self):
        self.assertEqual(self.store.vector_words, ['back', 'quietly', 'murmured'])
        self.assertEqual(self.store.vector_matrix.shape, (3, 3))
        np.testing.assert_allclose(self.store.vector_matrix[2], [1.0, 0.0, 0.0])


class TestLexiconStoreImmutability(unittest.TestCase):
    """Test that a loaded store cannot be modified."""

    def setUp(self):
        self.store = load({'quietly': -11.07}, {'quietly': [0.3, 0.2, 0.1]})

    def test_vectors_are_read_only(self):
        entry = self.store.lookup('quietly')
        with self.assertRaises(ValueError):
            entry.vector[0] = 5.0

    def test_entries_are_frozen(self):
        entry = self.store.lookup('quietly')
        with self.assertRaises(AttributeError):
            entry.log_prob = 0.0

    def test_entries_mapping_is_read_only(self):
        with self.assertRaises(TypeError):
            self.store.entries['new'] = LexiconEntry('new', -1.0)

    def test_vector_matrix_is_read_only(self):
        with self.assertRaises(ValueError):
            self.store.vector_matrix[0, 0] = 1.0


class TestLexiconStoreLoadErrors(unittest.TestCase):
    """Test that inconsistent tables fail to load."""

    def test_dimension_mismatch_raises_load_error(self):
        with self.assertRaises(LoadError) as ctx:
            load({'a': -1.0, 'b': -2.0}, {'a': [1.0, 2.0, 3.0], 'b': [1.0, 2.0]})
        self.assertEqual(ctx.exception.word, 'b')
        self.assertEqual(ctx.exception.expected, 3)
        self.assertEqual(ctx.exception.actual, 2)

    def test_empty_vector_raises_load_error(self):
        with self.assertRaises(LoadError):
            load({'a': -1.0}, {'a': []})

    def test_store_without_vectors(self):
        store = load({'a': -1.0, 'b': -2.0})
        self.assertIsNone(store.dimension)
        self.assertEqual(store.vector_words, [])
        self.assertIsInstance(store, LexiconStore)


if __name__ == '__main__':
    unittest.main()
