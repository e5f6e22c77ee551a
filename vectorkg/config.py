# /vectorkg/config.py

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STOPWORDS: Tuple[str, ...] = (
    "a", "about", "after", "all", "also", "an", "and", "any", "are", "as", "at",
    "be", "been", "but", "by", "can", "could", "did", "do", "does", "for", "from",
    "had", "has", "have", "he", "her", "his", "how", "i", "if", "in", "into", "is",
    "it", "its", "just", "more", "most", "no", "not", "of", "on", "or", "our",
    "out", "she", "so", "some", "than", "that", "the", "their", "them", "then",
    "there", "these", "they", "this", "those", "to", "too", "up", "very", "was",
    "we", "were", "what", "when", "which", "who", "will", "with", "would", "you",
    "your",
)


class Settings(BaseSettings):
    """
    Centralized application settings. Pydantic's BaseSettings will automatically
    load these from environment variables or a .env file.
    """
    # --- Embedding Generation ---
    EMBEDDING_DIM: int = Field(768, description="Dimensionality of every node embedding.")
    EMBEDDING_SEED: int = Field(0, description="Seed mixed into every per-text embedding generator.")

    # --- Keyword Extraction ---
    MAX_KEYWORDS: int = Field(10, description="Maximum number of keywords kept per document.")
    MIN_TOKEN_LENGTH: int = Field(3, description="Tokens shorter than this are never keywords.")
    DEDUPE_TEXTS: bool = Field(False, description="Skip documents whose exact text is already stored.")

    # --- Ingestion ---
    STORE_PATH: str = Field("graph_store.json", description="Path of the persisted graph store.")
    DATA_DIR: str = Field("data", description="Directory scanned for text documents.")
    CHUNK_SIZE: int = Field(1000, description="Maximum characters per document chunk.")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", description="Level for the structured JSON loggers.")

    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')


class GraphConfig(BaseModel):
    """
    Parameters a graph store is built with. Frozen: a store keeps the config it
    was first built from, and it is persisted with the graph so a reload
    reproduces the same dimensionality and extraction rules.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    embedding_dim: int = Field(768, gt=0, description="Length of every embedding vector.")
    seed: int = Field(0, ge=0, description="Seed controlling deterministic embedding generation.")
    max_keywords: int = Field(10, ge=0, description="Maximum keywords extracted per document.")
    min_token_length: int = Field(3, ge=1, description="Minimum keyword length in characters.")
    stopwords: Tuple[str, ...] = Field(DEFAULT_STOPWORDS, description="Tokens never used as keywords.")
    dedupe_texts: bool = Field(False, description="Skip documents whose text is already stored.")

    @field_validator('stopwords')
    @classmethod
    def _normalize_stopwords(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        # sorted so the persisted form does not depend on input order
        return tuple(sorted({word.strip().casefold() for word in value if word.strip()}))

    @classmethod
    def from_settings(cls, source: Settings) -> "GraphConfig":
        return cls(
            embedding_dim=source.EMBEDDING_DIM,
            seed=source.EMBEDDING_SEED,
            max_keywords=source.MAX_KEYWORDS,
            min_token_length=source.MIN_TOKEN_LENGTH,
            dedupe_texts=source.DEDUPE_TEXTS,
        )


settings = Settings()
