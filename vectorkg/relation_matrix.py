# /vectorkg/relation_matrix.py

import math
from typing import Dict, Iterator, List, Tuple

import numpy as np


class RelationMatrix:
    """
    Keyword-by-text association weights.

    Rows are keyword nodes and columns are text nodes, both in insertion order.
    Entries are kept in a sparse ``(row, col) -> weight`` map, so adding a row
    or column never touches existing entries. Missing entries read as 0.
    """

    def __init__(self, rows: int = 0, cols: int = 0):
        if rows < 0 or cols < 0:
            raise ValueError(f"matrix shape must be non-negative, got ({rows}, {cols})")
        self._rows = rows
        self._cols = cols
        self._entries: Dict[Tuple[int, int], float] = {}
        self._by_row: Dict[int, Dict[int, float]] = {}
        self._by_col: Dict[int, Dict[int, float]] = {}

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    def add_row(self) -> int:
        """Append an all-zero row and return its index."""
        self._rows += 1
        return self._rows - 1

    def add_col(self) -> int:
        """Append an all-zero column and return its index."""
        self._cols += 1
        return self._cols - 1

    def _check(self, row: int, col: int):
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError(f"entry ({row}, {col}) outside matrix of shape {self.shape}")

    def get(self, row: int, col: int) -> float:
        self._check(row, col)
        return self._entries.get((row, col), 0.0)

    def set(self, row: int, col: int, value: float):
        self._check(row, col)
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"weights must be finite and non-negative, got {value}")
        if value == 0:
            self._entries.pop((row, col), None)
            self._by_row.get(row, {}).pop(col, None)
            self._by_col.get(col, {}).pop(row, None)
            return
        value = float(value)
        self._entries[(row, col)] = value
        self._by_row.setdefault(row, {})[col] = value
        self._by_col.setdefault(col, {})[row] = value

    def increment(self, row: int, col: int, amount: float = 1.0) -> float:
        value = self.get(row, col) + amount
        self.set(row, col, value)
        return value

    def row(self, row: int) -> Dict[int, float]:
        """Non-zero entries of a keyword row as ``{col: weight}``."""
        if not 0 <= row < self._rows:
            raise IndexError(f"row {row} outside matrix of shape {self.shape}")
        return dict(self._by_row.get(row, {}))

    def col(self, col: int) -> Dict[int, float]:
        """Non-zero entries of a text column as ``{row: weight}``."""
        if not 0 <= col < self._cols:
            raise IndexError(f"column {col} outside matrix of shape {self.shape}")
        return dict(self._by_col.get(col, {}))

    def entries(self) -> Iterator[Tuple[int, int, float]]:
        """Non-zero entries as ``(row, col, weight)``, sorted by row then column."""
        for (row, col) in sorted(self._entries):
            yield row, col, self._entries[(row, col)]

    def nnz(self) -> int:
        return len(self._entries)

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self.shape, dtype=np.float64)
        for (row, col), value in self._entries.items():
            dense[row, col] = value
        return dense

    @classmethod
    def from_entries(cls, rows: int, cols: int, entries: List[Tuple[int, int, float]]) -> "RelationMatrix":
        matrix = cls(rows, cols)
        for row, col, value in entries:
            matrix.set(row, col, value)
        return matrix

    def __eq__(self, other) -> bool:
        if not isinstance(other, RelationMatrix):
            return NotImplemented
        return self.shape == other.shape and self._entries == other._entries

    def __repr__(self) -> str:
        return f"RelationMatrix(shape={self.shape}, nnz={self.nnz()})"
