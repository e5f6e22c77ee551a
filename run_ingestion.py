# /run_ingestion.py

from dotenv import load_dotenv

from ingestion.engine import IngestionEngine
from ingestion.sources import LocalDirectorySource
from vectorkg.config import GraphConfig, Settings
from vectorkg.logger import get_logger

logger = get_logger(__name__)

def main():
    """
    Main function to configure and run the ingestion pipeline.
    """
    load_dotenv()
    settings = Settings()

    # --- Configure Your Data Sources Here ---
    local_source = LocalDirectorySource(path=settings.DATA_DIR, chunk_size=settings.CHUNK_SIZE)

    # --- Run the Ingestion Engine ---
    engine = IngestionEngine(
        data_sources=[local_source],
        config=GraphConfig.from_settings(settings),
        store_path=settings.STORE_PATH,
    )
    store = engine.run()
    logger.info(
        "Graph store ready",
        extra={"text_nodes": len(store.text_nodes), "keyword_nodes": len(store.keyword_nodes)},
    )


if __name__ == '__main__':
    main()
