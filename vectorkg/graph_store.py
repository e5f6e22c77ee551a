# /vectorkg/graph_store.py

from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from vectorkg.config import GraphConfig
from vectorkg.embeddings import EmbeddingGenerator, HashSeededEmbedder
from vectorkg.errors import ConfigMismatch, DimensionMismatch
from vectorkg.keywords import keyword_counts, normalize_keyword
from vectorkg.logger import get_logger
from vectorkg.models import Document, KeywordNode, SourceInfo, TextNode
from vectorkg.relation_matrix import RelationMatrix

logger = get_logger(__name__)

KeywordRef = Union[int, str]


def cosine_scores(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Cosine similarity of every row of ``matrix`` against ``query``.
    Rows (or a query) with zero norm score 0 instead of dividing by zero.

    Cosine does not depend on scale, so each vector is first divided by its
    largest absolute component; norms then stay within [1, sqrt(dim)] and
    cannot overflow or underflow.
    """
    if matrix.shape[0] == 0:
        return np.zeros(0)
    query_scale = float(np.max(np.abs(query))) if query.size else 0.0
    if query_scale == 0.0:
        return np.zeros(matrix.shape[0])
    scaled_query = query / query_scale

    row_scales = np.max(np.abs(matrix), axis=1) if matrix.shape[1] else np.zeros(matrix.shape[0])
    scores = np.zeros(matrix.shape[0])
    nonzero = row_scales > 0
    rows = matrix[nonzero] / row_scales[nonzero, None]
    scores[nonzero] = (rows @ scaled_query) / (np.linalg.norm(rows, axis=1) * np.linalg.norm(scaled_query))
    return np.clip(scores, -1.0, 1.0)


def top_k(scores: np.ndarray, k: int) -> List[int]:
    """Indices of the k best scores, descending, ties by ascending index."""
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    order = np.argsort(-scores, kind="stable")
    return [int(i) for i in order[:k]]


class GraphStore:
    """
    In-memory bipartite graph of text nodes and keyword nodes.

    Text and keyword nodes live in insertion-ordered lists whose positions are
    their ids. Keywords are de-duplicated store-wide through a
    ``normalized keyword -> id`` index. The relation matrix holds, at
    (keyword id, text id), the number of times that keyword occurs in that
    text (count policy; keywords cut by ``max_keywords`` are not recorded).

    ``build`` is additive: repeated calls append nodes and never discard
    existing ones. Nothing here is thread-safe; callers serialize writers.
    """

    def __init__(self, config: Optional[GraphConfig] = None, embedder: Optional[EmbeddingGenerator] = None):
        self._config = config
        self._embedder = embedder
        if config is not None and embedder is not None and embedder.dim != config.embedding_dim:
            raise DimensionMismatch(config.embedding_dim, embedder.dim)
        self._texts: List[TextNode] = []
        self._keywords: List[KeywordNode] = []
        self._keyword_index: Dict[str, int] = {}
        self._text_index: Dict[str, int] = {}
        self._matrix = RelationMatrix()
        self._text_vectors: Optional[np.ndarray] = None
        self._keyword_vectors: Optional[np.ndarray] = None

    # --- Accessors ---

    @property
    def config(self) -> Optional[GraphConfig]:
        return self._config

    @property
    def text_nodes(self) -> Tuple[TextNode, ...]:
        return tuple(self._texts)

    @property
    def keyword_nodes(self) -> Tuple[KeywordNode, ...]:
        return tuple(self._keywords)

    @property
    def matrix(self) -> RelationMatrix:
        return self._matrix

    @property
    def sources(self) -> List[SourceInfo]:
        return [node.source for node in self._texts]

    def __len__(self) -> int:
        return len(self._texts)

    def get_keyword(self, keyword: str) -> Optional[KeywordNode]:
        index = self._keyword_index.get(normalize_keyword(keyword))
        return None if index is None else self._keywords[index]

    def _get_embedder(self) -> EmbeddingGenerator:
        if self._embedder is None:
            self._embedder = HashSeededEmbedder(self._config.embedding_dim, self._config.seed)
        return self._embedder

    # --- Construction ---

    def _adopt_config(self, config: Optional[GraphConfig]) -> GraphConfig:
        if self._config is None:
            candidate = config if config is not None else GraphConfig()
            if self._embedder is not None and self._embedder.dim != candidate.embedding_dim:
                raise DimensionMismatch(candidate.embedding_dim, self._embedder.dim)
            self._config = candidate
        elif config is not None and config != self._config:
            raise ConfigMismatch(
                "store was built with a different config; a store's config cannot change"
            )
        return self._config

    def _vector(self, embedder: EmbeddingGenerator, text: str) -> List[float]:
        vector = np.asarray(embedder.embed(text), dtype=np.float64).reshape(-1)
        if vector.shape[0] != self._config.embedding_dim:
            raise DimensionMismatch(self._config.embedding_dim, vector.shape[0])
        if not np.all(np.isfinite(vector)):
            raise ValueError(f"embedding of {text!r} contains non-finite values")
        return vector.tolist()

    def _add_text(self, document: Document, embedding: List[float]) -> TextNode:
        node = TextNode(
            id=len(self._texts),
            text=document.text,
            source=document.source,
            embedding=embedding,
            token_count=len(document.text.split()),
        )
        self._texts.append(node)
        self._text_index.setdefault(node.text, node.id)
        self._matrix.add_col()
        return node

    def _resolve_keyword(self, normalized: str, new_vectors: Dict[str, List[float]]) -> KeywordNode:
        index = self._keyword_index.get(normalized)
        if index is not None:
            return self._keywords[index]
        node = KeywordNode(
            id=len(self._keywords),
            keyword=normalized,
            embedding=new_vectors[normalized],
        )
        self._keywords.append(node)
        self._keyword_index[normalized] = node.id
        self._matrix.add_row()
        return node

    def _add_document(self, document: Document, config: GraphConfig, embedder: EmbeddingGenerator):
        # every vector is computed before the first node is added, so a failing
        # embedder leaves no partial document behind
        text_vector = self._vector(embedder, document.text)
        counts = [(normalize_keyword(keyword), count) for keyword, count in keyword_counts(document.text, config)]
        new_vectors: Dict[str, List[float]] = {}
        for normalized, _ in counts:
            if normalized not in self._keyword_index and normalized not in new_vectors:
                new_vectors[normalized] = self._vector(embedder, normalized)

        text_node = self._add_text(document, text_vector)
        for normalized, count in counts:
            keyword_node = self._resolve_keyword(normalized, new_vectors)
            self._matrix.increment(keyword_node.id, text_node.id, float(count))

    def build(self, documents: Sequence[Document], config: Optional[GraphConfig] = None):
        """
        Add documents to the graph, in order.

        Each document becomes a text node (plus a relation matrix column). Its
        keywords resolve to existing keyword nodes or create new ones (plus a
        matrix row), and the (keyword, text) entry is incremented by the
        keyword's occurrence count in the document.

        Documents are added one at a time: if embedding fails, documents
        before the failing one stay in the store and nothing of the failing
        one is added.
        """
        config = self._adopt_config(config)
        if not documents:
            return

        logger.info("Building graph from documents", extra={"documents": len(documents)})
        embedder = self._get_embedder()
        texts_before, keywords_before = len(self._texts), len(self._keywords)
        skipped = 0

        try:
            for document in documents:
                if config.dedupe_texts and document.text in self._text_index:
                    skipped += 1
                    logger.debug(
                        "Skipping duplicate text",
                        extra={"source_file": document.source.filename, "existing_id": self._text_index[document.text]},
                    )
                    continue
                self._add_document(document, config, embedder)
        finally:
            self._text_vectors = None
            self._keyword_vectors = None

        logger.info(
            "Graph build complete",
            extra={
                "text_nodes_added": len(self._texts) - texts_before,
                "keyword_nodes_added": len(self._keywords) - keywords_before,
                "duplicates_skipped": skipped,
                "text_nodes": len(self._texts),
                "keyword_nodes": len(self._keywords),
            },
        )

    # --- Similarity search ---

    def _check_query(self, query: Sequence[float]) -> np.ndarray:
        # an unbuilt store is checked against the default dimension, which is
        # also what save() records for it
        dim = self._config.embedding_dim if self._config is not None else GraphConfig().embedding_dim
        vector = np.asarray(query, dtype=np.float64).reshape(-1)
        if vector.shape[0] != dim:
            raise DimensionMismatch(dim, vector.shape[0])
        if not np.all(np.isfinite(vector)):
            raise ValueError("query vector must contain only finite values")
        return vector

    def _text_matrix(self) -> np.ndarray:
        if self._text_vectors is None:
            self._text_vectors = np.asarray([node.embedding for node in self._texts], dtype=np.float64)
        return self._text_vectors

    def _keyword_matrix(self) -> np.ndarray:
        if self._keyword_vectors is None:
            self._keyword_vectors = np.asarray([node.embedding for node in self._keywords], dtype=np.float64)
        return self._keyword_vectors

    def search(self, query: Sequence[float], k: int) -> List[Tuple[TextNode, float]]:
        """
        Brute-force top-k text nodes by cosine similarity to ``query``.

        Results are ordered by descending score, ties by ascending id. A query
        of the wrong length raises DimensionMismatch and one with NaN or infinite
        components raises ValueError; an empty store gives [].
        An unbuilt store checks the length against the default dimension.
        """
        vector = self._check_query(query)
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if not self._texts:
            return []
        scores = cosine_scores(self._text_matrix(), vector)
        return [(self._texts[i], float(scores[i])) for i in top_k(scores, k)]

    def search_text(self, text: str, k: int) -> List[Tuple[TextNode, float]]:
        """
        Embed ``text`` with the store's generator and search with it. With the
        default hash-seeded generator this only finds exact text matches;
        similar wording does not give similar vectors.
        """
        if self._config is None:
            return []
        return self.search(self._get_embedder().embed(text), k)

    def search_keywords(self, query: Sequence[float], k: int) -> List[Tuple[KeywordNode, float]]:
        vector = self._check_query(query)
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if not self._keywords:
            return []
        scores = cosine_scores(self._keyword_matrix(), vector)
        return [(self._keywords[i], float(scores[i])) for i in top_k(scores, k)]

    # --- Graph queries ---

    def _keyword_id(self, keyword: KeywordRef) -> Optional[int]:
        if isinstance(keyword, str):
            return self._keyword_index.get(normalize_keyword(keyword))
        if 0 <= keyword < len(self._keywords):
            return keyword
        return None

    def keyword_related_texts(self, keyword: KeywordRef, k: int) -> List[Tuple[TextNode, float]]:
        """Texts containing a keyword, by relation weight descending, ties by id."""
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        row = self._keyword_id(keyword)
        if row is None:
            return []
        weights = sorted(self._matrix.row(row).items(), key=lambda item: (-item[1], item[0]))
        return [(self._texts[col], weight) for col, weight in weights[:k]]

    def adjacent_keywords(self, keyword: KeywordRef, k: int) -> List[Tuple[KeywordNode, int]]:
        """
        Keywords sharing at least one text with ``keyword``, ranked by the
        number of shared texts (descending, ties by id). The keyword itself is
        never included.
        """
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        row = self._keyword_id(keyword)
        if row is None:
            return []
        shared: Dict[int, int] = {}
        for col in self._matrix.row(row):
            for other in self._matrix.col(col):
                if other != row:
                    shared[other] = shared.get(other, 0) + 1
        ranked = sorted(shared.items(), key=lambda item: (-item[1], item[0]))
        return [(self._keywords[other], count) for other, count in ranked[:k]]

    # --- Persistence ---

    def save(self, path):
        from vectorkg.persistence import save
        save(self, path)

    @classmethod
    def load(cls, path) -> "GraphStore":
        from vectorkg.persistence import load
        return load(path)

    @classmethod
    def _restore(
        cls,
        config: GraphConfig,
        texts: List[TextNode],
        keywords: List[KeywordNode],
        matrix: RelationMatrix,
    ) -> "GraphStore":
        store = cls(config)
        store._texts = list(texts)
        store._keywords = list(keywords)
        store._keyword_index = {node.keyword: node.id for node in keywords}
        for node in texts:
            store._text_index.setdefault(node.text, node.id)
        store._matrix = matrix
        return store
