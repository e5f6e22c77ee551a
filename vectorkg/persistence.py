"""
JSON persistence for a whole graph store.

The file is one JSON object::

    {
      "format_version": 1,
      "config": {...},
      "text_nodes": [{"id", "text", "source", "embedding", "token_count"}, ...],
      "keyword_nodes": [{"id", "keyword", "embedding"}, ...],
      "matrix": {"rows": R, "cols": C, "entries": [[row, col, weight], ...]}
    }

The matrix is stored sparse: only non-zero entries, sorted by (row, col).
Floats are written with Python's shortest round-trip repr, so reloading
reproduces every embedding and weight exactly.
"""

import json
import math
import os
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vectorkg.config import GraphConfig
from vectorkg.errors import ParseError, StoreIOError
from vectorkg.graph_store import GraphStore
from vectorkg.keywords import normalize_keyword
from vectorkg.logger import get_logger
from vectorkg.models import KeywordNode, TextNode
from vectorkg.relation_matrix import RelationMatrix

logger = get_logger(__name__)

FORMAT_VERSION = 1


class MatrixSnapshot(BaseModel):
    model_config = ConfigDict(extra='forbid')

    rows: int = Field(ge=0)
    cols: int = Field(ge=0)
    entries: List[Tuple[int, int, float]]


class GraphSnapshot(BaseModel):
    model_config = ConfigDict(extra='forbid')

    format_version: int
    config: GraphConfig
    text_nodes: List[TextNode]
    keyword_nodes: List[KeywordNode]
    matrix: MatrixSnapshot


def _snapshot(store: GraphStore) -> GraphSnapshot:
    rows, cols = store.matrix.shape
    return GraphSnapshot(
        format_version=FORMAT_VERSION,
        config=store.config or GraphConfig(),
        text_nodes=list(store.text_nodes),
        keyword_nodes=list(store.keyword_nodes),
        matrix=MatrixSnapshot(rows=rows, cols=cols, entries=list(store.matrix.entries())),
    )


def save(store: GraphStore, path):
    """Write the store to ``path``, replacing any existing file atomically."""
    target = Path(path)
    payload = json.dumps(_snapshot(store).model_dump(mode='json'), indent=2)
    tmp_path = target.with_name(target.name + '.tmp')
    try:
        tmp_path.write_text(payload, encoding='utf-8')
        os.replace(tmp_path, target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise StoreIOError(f"failed to write graph store: {target}: {exc}") from exc

    logger.info(
        "Graph store saved",
        extra={"path": str(target), "text_nodes": len(store.text_nodes), "keyword_nodes": len(store.keyword_nodes)},
    )


def _check_embedding(kind: str, node_id: int, embedding: List[float], dim: int):
    if len(embedding) != dim:
        raise ParseError(f"{kind} node {node_id} embedding has length {len(embedding)}, expected {dim}")
    if not all(math.isfinite(component) for component in embedding):
        raise ParseError(f"{kind} node {node_id} embedding contains non-finite values")


def _check_consistency(snapshot: GraphSnapshot):
    dim = snapshot.config.embedding_dim

    for position, node in enumerate(snapshot.text_nodes):
        if node.id != position:
            raise ParseError(f"text node at position {position} has id {node.id}")
        _check_embedding("text", node.id, node.embedding, dim)

    seen = set()
    for position, node in enumerate(snapshot.keyword_nodes):
        if node.id != position:
            raise ParseError(f"keyword node at position {position} has id {node.id}")
        _check_embedding("keyword", node.id, node.embedding, dim)
        if node.keyword != normalize_keyword(node.keyword):
            raise ParseError(f"keyword node {node.id} keyword {node.keyword!r} is not normalized")
        if node.keyword in seen:
            raise ParseError(f"keyword {node.keyword!r} appears more than once")
        seen.add(node.keyword)

    matrix = snapshot.matrix
    expected = (len(snapshot.keyword_nodes), len(snapshot.text_nodes))
    if (matrix.rows, matrix.cols) != expected:
        raise ParseError(f"matrix shape {(matrix.rows, matrix.cols)} does not match node counts {expected}")

    cells = set()
    for row, col, value in matrix.entries:
        if not (0 <= row < matrix.rows and 0 <= col < matrix.cols):
            raise ParseError(f"matrix entry ({row}, {col}) is out of bounds")
        if not math.isfinite(value) or value < 0:
            raise ParseError(f"matrix entry ({row}, {col}) has invalid weight {value}")
        if (row, col) in cells:
            raise ParseError(f"matrix entry ({row}, {col}) appears more than once")
        cells.add((row, col))


def load(path) -> GraphStore:
    """
    Rebuild a store saved with ``save``. Unreadable files raise StoreIOError;
    malformed, incomplete or inconsistent content raises ParseError.
    """
    source = Path(path)
    try:
        raw = source.read_text(encoding='utf-8')
    except OSError as exc:
        raise StoreIOError(f"failed to read graph store: {source}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"graph store is not valid UTF-8: {source}: {exc}") from exc

    try:
        snapshot = GraphSnapshot.model_validate_json(raw, strict=True)
    except ValidationError as exc:
        raise ParseError(f"malformed graph store: {source}: {exc}") from exc

    if snapshot.format_version != FORMAT_VERSION:
        raise ParseError(f"unsupported format version {snapshot.format_version} in {source}")
    _check_consistency(snapshot)

    matrix = RelationMatrix.from_entries(snapshot.matrix.rows, snapshot.matrix.cols, snapshot.matrix.entries)
    store = GraphStore._restore(snapshot.config, snapshot.text_nodes, snapshot.keyword_nodes, matrix)
    logger.info(
        "Graph store loaded",
        extra={"path": str(source), "text_nodes": len(store.text_nodes), "keyword_nodes": len(store.keyword_nodes)},
    )
    return store
