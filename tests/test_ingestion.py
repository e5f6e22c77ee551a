import shutil
import tempfile
import unittest
from unittest.mock import patch

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ingestion.engine import IngestionEngine
from ingestion.sources import InMemorySource, LocalDirectorySource, split_into_chunks
from vectorkg.config import GraphConfig
from vectorkg.errors import ParseError
from vectorkg.models import Document, SourceInfo

class TestSplitIntoChunks(unittest.TestCase):

    def test_paragraphs_are_packed_up_to_the_limit(self):
        self.assertEqual(split_into_chunks("aaaa\n\nbbbb", 5), ["aaaa", "bbbb"])
        self.assertEqual(split_into_chunks("aaaa\n\nbb", 8), ["aaaa\n\nbb"])

    def test_long_paragraph_is_cut(self):
        self.assertEqual(split_into_chunks("abcdefghij", 4), ["abcd", "efgh", "ij"])

    def test_blank_text_has_no_chunks(self):
        self.assertEqual(split_into_chunks("  \n\n ", 10), [])

    def test_invalid_chunk_size(self):
        with self.assertRaises(ValueError):
            split_into_chunks("text", 0)

class TestLocalDirectorySource(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        with open(os.path.join(self.tmp_dir, "b.md"), "w", encoding="utf-8") as handle:
            handle.write("first paragraph\n\nsecond paragraph")
        with open(os.path.join(self.tmp_dir, "a.txt"), "w", encoding="utf-8") as handle:
            handle.write("alpha beta gamma")
        with open(os.path.join(self.tmp_dir, "ignored.csv"), "w", encoding="utf-8") as handle:
            handle.write("x,y")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_loads_matching_files_in_name_order(self):
        documents = LocalDirectorySource(self.tmp_dir, chunk_size=20).load_documents()
        self.assertEqual([doc.text for doc in documents], ["alpha beta gamma", "first paragraph", "second paragraph"])
        self.assertEqual(documents[0].source, SourceInfo(filename="a.txt", file_type="txt", chunk_idx=0))
        self.assertEqual(documents[2].source.file_type, "md")
        self.assertEqual(documents[2].source.chunk_idx, 1)

    def test_invalid_directory(self):
        with self.assertRaises(ValueError):
            LocalDirectorySource(os.path.join(self.tmp_dir, "nope"))

class TestIngestionEngine(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.store_path = os.path.join(self.tmp_dir, "graph.json")
        self.config = GraphConfig(embedding_dim=8)
        self.source = InMemorySource([
            Document(text="graph stores link keywords", source=SourceInfo(filename="notes.txt", file_type="txt")),
        ])

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_runs_are_additive_over_the_saved_store(self):
        first = IngestionEngine([self.source], self.config, self.store_path).run()
        self.assertEqual(len(first), 1)
        self.assertTrue(os.path.exists(self.store_path))

        second = IngestionEngine([self.source], self.config, self.store_path).run()
        self.assertEqual(len(second), 2)
        self.assertEqual(len(second.keyword_nodes), len(first.keyword_nodes))

    def test_no_documents_does_not_write_a_store(self):
        store = IngestionEngine([InMemorySource([])], self.config, self.store_path).run()
        self.assertEqual(len(store), 0)
        self.assertFalse(os.path.exists(self.store_path))

    def test_corrupt_store_is_reported(self):
        with open(self.store_path, "w", encoding="utf-8") as handle:
            handle.write("[]")
        with patch('ingestion.engine.logger') as mock_logger:
            with self.assertRaises(ParseError):
                IngestionEngine([self.source], self.config, self.store_path).run()
        mock_logger.exception.assert_called_once()

if __name__ == '__main__':
    unittest.main()
