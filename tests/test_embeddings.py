import unittest
from unittest.mock import MagicMock, patch

import numpy as np

# Add root directory to path to allow imports from 'vectorkg'
import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vectorkg.embeddings import HashSeededEmbedder, embed

class TestEmbed(unittest.TestCase):

    def test_identical_arguments_give_identical_vectors(self):
        first = embed("cats are great pets", 32, 7)
        second = embed("cats are great pets", 32, 7)
        self.assertTrue(np.array_equal(first, second))

    def test_vector_has_requested_length_and_unit_norm(self):
        vector = embed("hello world", 64, 0)
        self.assertEqual(vector.shape, (64,))
        self.assertAlmostEqual(float(np.linalg.norm(vector)), 1.0, places=12)

    def test_seed_and_text_change_the_vector(self):
        base = embed("hello", 16, 0)
        self.assertFalse(np.array_equal(base, embed("hello", 16, 1)))
        self.assertFalse(np.array_equal(base, embed("hello!", 16, 0)))

    def test_empty_string_is_embedded(self):
        vector = embed("", 8, 0)
        self.assertEqual(vector.shape, (8,))
        self.assertTrue(np.all(np.isfinite(vector)))

    def test_invalid_dimension_or_seed_is_rejected(self):
        with self.assertRaises(ValueError):
            embed("text", 0, 0)
        with self.assertRaises(ValueError):
            embed("text", 8, -1)

    @patch('numpy.random.default_rng')
    def test_zero_norm_draw_falls_back_to_first_basis_vector(self, mock_default_rng):
        mock_rng = MagicMock()
        mock_rng.standard_normal.return_value = np.zeros(4)
        mock_default_rng.return_value = mock_rng

        vector = embed("anything", 4, 0)

        self.assertEqual(vector.tolist(), [1.0, 0.0, 0.0, 0.0])


class TestHashSeededEmbedder(unittest.TestCase):

    def test_matches_embed_function(self):
        embedder = HashSeededEmbedder(dim=12, seed=3)
        self.assertEqual(embedder.dim, 12)
        self.assertTrue(np.array_equal(embedder.embed("graph"), embed("graph", 12, 3)))

    def test_embed_texts_preserves_order(self):
        embedder = HashSeededEmbedder(dim=6)
        vectors = embedder.embed_texts(["a", "b"])
        self.assertEqual(len(vectors), 2)
        self.assertTrue(np.array_equal(vectors[1], embed("b", 6, 0)))

    def test_rejects_non_positive_dimension(self):
        with self.assertRaises(ValueError):
            HashSeededEmbedder(dim=0)

if __name__ == '__main__':
    unittest.main()
