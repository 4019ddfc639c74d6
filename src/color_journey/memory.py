from __future__ import annotations

import threading
from typing import Dict, List, Tuple

import numpy as np

NULL_PTR = 0


class LinearMemory:
    """
    A float64 arena addressed by word offset, shared between the caller and
    the compiled kernel.

    ``malloc`` hands out first-fit blocks and grows the arena when nothing
    fits; ``free`` returns them and merges neighbours. Offset 0 is never
    handed out so it can stand for "no block". Pointers survive growth, array
    views do not: re-take ``view()`` after any ``malloc``.
    """

    def __init__(self, words: int = 4096) -> None:
        self.heap = np.zeros(max(2, int(words)), dtype=np.float64)
        self._free: List[Tuple[int, int]] = [(1, self.heap.size - 1)]
        self._live: Dict[int, int] = {}
        self.lock = threading.RLock()

    @property
    def outstanding(self) -> int:
        """Number of blocks allocated and not yet freed."""
        return len(self._live)

    def malloc(self, words: int) -> int:
        words = int(words)
        if words <= 0:
            raise ValueError("allocation size must be positive")
        with self.lock:
            for idx, (ptr, size) in enumerate(self._free):
                if size >= words:
                    if size == words:
                        del self._free[idx]
                    else:
                        self._free[idx] = (ptr + words, size - words)
                    self._live[ptr] = words
                    return ptr
            self._grow(words)
            return self.malloc(words)

    def free(self, ptr: int) -> None:
        if ptr == NULL_PTR:
            return
        with self.lock:
            try:
                size = self._live.pop(ptr)
            except KeyError:
                raise ValueError(f"free of unallocated pointer {ptr}") from None
            self._free.append((ptr, size))
            self._free.sort()
            self._coalesce()

    def view(self, ptr: int, words: int) -> np.ndarray:
        return self.heap[ptr : ptr + words]

    # ---- internals ----

    def _grow(self, words: int) -> None:
        old = self.heap.size
        new = old * 2
        while new - old < words:
            new *= 2
        heap = np.zeros(new, dtype=np.float64)
        heap[:old] = self.heap
        self.heap = heap
        self._free.append((old, new - old))
        self._free.sort()
        self._coalesce()

    def _coalesce(self) -> None:
        merged: List[Tuple[int, int]] = []
        for ptr, size in self._free:
            if merged and merged[-1][0] + merged[-1][1] == ptr:
                last_ptr, last_size = merged[-1]
                merged[-1] = (last_ptr, last_size + size)
            else:
                merged.append((ptr, size))
        self._free = merged


__all__ = ["NULL_PTR", "LinearMemory"]
