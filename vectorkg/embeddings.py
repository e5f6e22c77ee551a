"""
Deterministic text embeddings.

Vectors produced here are a reproducible pseudo-random function of the input
text and seed. They carry NO lexical or semantic meaning: two texts that differ
by one character get unrelated vectors. Anything that needs real semantic
similarity should implement ``EmbeddingGenerator`` on top of a model instead.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

# Below this norm a raw draw is treated as the zero vector.
MIN_NORM = 1e-12


def _text_entropy(text: str) -> List[int]:
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [int.from_bytes(digest[i:i + 4], "little") for i in range(0, len(digest), 4)]


def embed(text: str, dim: int, seed: int) -> np.ndarray:
    """
    Map a text to a unit-length float64 vector of length ``dim``.

    Pure and deterministic: the generator is seeded from ``seed`` and a SHA-256
    digest of the text, so identical arguments give bit-identical vectors in
    every process.
    """
    if dim <= 0:
        raise ValueError(f"embedding dimension must be positive, got {dim}")
    if seed < 0:
        raise ValueError(f"seed must be non-negative, got {seed}")

    rng = np.random.default_rng(np.random.SeedSequence([seed] + _text_entropy(text)))
    vector = rng.standard_normal(dim)
    norm = float(np.linalg.norm(vector))
    if norm < MIN_NORM:
        vector = np.zeros(dim)
        vector[0] = 1.0
        return vector
    return vector / norm


class EmbeddingGenerator(ABC):
    """Interface the graph store uses to turn strings into vectors."""

    dim: int

    @abstractmethod
    def embed(self, text: str) -> np.ndarray:
        pass

    def embed_texts(self, texts: Sequence[str]) -> List[np.ndarray]:
        """Batch embed. Same as calling embed() on each text."""
        return [self.embed(text) for text in texts]


class HashSeededEmbedder(EmbeddingGenerator):
    """Default generator: hash-seeded random unit vectors."""

    def __init__(self, dim: int, seed: int = 0):
        if dim <= 0:
            raise ValueError(f"embedding dimension must be positive, got {dim}")
        self.dim = dim
        self.seed = seed

    def embed(self, text: str) -> np.ndarray:
        return embed(text, self.dim, self.seed)
