import os
from typing import List

from vectorkg.config import GraphConfig
from vectorkg.graph_store import GraphStore
from vectorkg.logger import get_logger
from ingestion.sources import DataSource

logger = get_logger(__name__)


class IngestionEngine:
    def __init__(self, data_sources: List[DataSource], config: GraphConfig, store_path: str):
        self.data_sources = data_sources
        self.config = config
        self.store_path = store_path

    def run(self) -> GraphStore:
        """
        Runs the ingestion pipeline:
        1. Loads data from all sources.
        2. Builds the documents into the graph store, adding to an existing one.
        3. Saves the store back to ``store_path``.
        """
        all_documents = []
        for source in self.data_sources:
            all_documents.extend(source.load_documents())

        store = self._open_store()

        if not all_documents:
            logger.info("No documents loaded. Exiting ingestion.")
            return store

        store.build(all_documents, self.config)
        store.save(self.store_path)
        logger.info(
            "Ingestion process complete",
            extra={"documents": len(all_documents), "store_path": self.store_path},
        )
        return store

    def _open_store(self) -> GraphStore:
        """Loads the existing store so new documents are added to it, or starts an empty one."""
        if os.path.exists(self.store_path):
            logger.info("Existing graph store found. Adding new documents...", extra={"store_path": self.store_path})
            try:
                return GraphStore.load(self.store_path)
            except Exception:
                logger.exception("Could not open existing graph store", extra={"store_path": self.store_path})
                raise
        logger.info("Creating new graph store", extra={"store_path": self.store_path})
        return GraphStore(self.config)
