# /ingestion/sources.py

from abc import ABC, abstractmethod
from typing import List, Sequence
import os

from vectorkg.logger import get_logger
from vectorkg.models import Document, SourceInfo

logger = get_logger(__name__)


def split_into_chunks(text: str, chunk_size: int) -> List[str]:
    """
    Packs blank-line separated paragraphs into chunks of at most ``chunk_size``
    characters. A single paragraph longer than that is cut at the limit.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    chunks = []
    current = ""
    for paragraph in paragraphs:
        while len(paragraph) > chunk_size:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(paragraph[:chunk_size])
            paragraph = paragraph[chunk_size:].lstrip()
        if not paragraph:
            continue
        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) <= chunk_size:
            current = candidate
        else:
            chunks.append(current)
            current = paragraph
    if current:
        chunks.append(current)
    return chunks


class DataSource(ABC):
    """Abstract base class for a data source."""
    @abstractmethod
    def load_documents(self) -> List[Document]:
        """Loads documents from the source and returns them as a list."""
        pass

class LocalDirectorySource(DataSource):
    """Loads all text documents from a specified local directory, chunked."""
    def __init__(self, path: str, extensions: Sequence[str] = (".txt", ".md"), chunk_size: int = 1000):
        if not os.path.isdir(path):
            raise ValueError(f"The path {path} is not a valid directory.")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.path = path
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.chunk_size = chunk_size

    def load_documents(self) -> List[Document]:
        logger.info("Loading documents from local directory", extra={"path": self.path})
        all_docs = []
        for filename in sorted(os.listdir(self.path)):
            extension = os.path.splitext(filename)[1].lower()
            if extension not in self.extensions:
                continue
            file_path = os.path.join(self.path, filename)
            try:
                with open(file_path, encoding="utf-8") as handle:
                    text = handle.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to load file", extra={"source_file": filename, "error": str(e)})
                continue
            chunks = split_into_chunks(text, self.chunk_size)
            for chunk_idx, chunk in enumerate(chunks):
                all_docs.append(Document(
                    text=chunk,
                    source=SourceInfo(
                        filename=filename,
                        file_type=extension.lstrip("."),
                        chunk_idx=chunk_idx,
                    ),
                ))
            logger.info("Loaded file", extra={"source_file": filename, "chunks": len(chunks)})
        return all_docs

class InMemorySource(DataSource):
    """Serves a fixed list of documents, e.g. ones produced by another pipeline."""
    def __init__(self, documents: Sequence[Document]):
        self.documents = list(documents)

    def load_documents(self) -> List[Document]:
        return list(self.documents)
