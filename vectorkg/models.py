# /vectorkg/models.py

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

# Shared Pydantic data structures for documents and graph nodes.

class SourceInfo(BaseModel):
    filename: str = Field(description="Name of the file the text came from.")
    page_num: Optional[int] = Field(default=None, description="Page number within the file, if paged.")
    file_type: str = Field(description="File type tag (e.g., 'txt', 'pdf', 'md').")
    chunk_idx: Optional[int] = Field(default=None, description="Index of the chunk within the file, if chunked.")

class Document(BaseModel):
    text: str = Field(description="Raw document text.")
    source: SourceInfo = Field(description="Where the text came from.")

class TextNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Insertion ordinal among text nodes.")
    text: str = Field(description="The original document text.")
    source: SourceInfo = Field(description="Provenance of the text.")
    embedding: List[float] = Field(description="The vector embedding of the text.")
    token_count: int = Field(default=0, ge=0, description="Number of whitespace-separated tokens in the text.")

class KeywordNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Insertion ordinal among keyword nodes.")
    keyword: str = Field(description="Normalized (trimmed, case-folded) keyword string.")
    embedding: List[float] = Field(description="The vector embedding of the keyword.")
