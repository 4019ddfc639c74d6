import numpy as np
import pytest

from color_journey.memory import NULL_PTR, LinearMemory


def test_malloc_never_returns_null():
    mem = LinearMemory(words=16)
    ptrs = [mem.malloc(3) for _ in range(4)]
    assert NULL_PTR not in ptrs
    assert len(set(ptrs)) == 4
    assert mem.outstanding == 4


def test_free_and_reuse():
    mem = LinearMemory(words=16)
    a = mem.malloc(4)
    b = mem.malloc(4)
    mem.free(a)
    assert mem.malloc(4) == a
    mem.free(b)
    mem.free(a)
    assert mem.outstanding == 0


def test_double_free_raises():
    mem = LinearMemory(words=16)
    p = mem.malloc(2)
    mem.free(p)
    with pytest.raises(ValueError):
        mem.free(p)


def test_free_null_is_noop():
    LinearMemory().free(NULL_PTR)


def test_grows_and_keeps_contents():
    mem = LinearMemory(words=8)
    p = mem.malloc(4)
    mem.view(p, 4)[:] = [1.0, 2.0, 3.0, 4.0]
    q = mem.malloc(100)
    assert mem.heap.size >= 104
    assert np.array_equal(mem.view(p, 4), [1.0, 2.0, 3.0, 4.0])
    assert q != p


def test_coalesces_neighbours():
    mem = LinearMemory(words=16)
    ptrs = [mem.malloc(5) for _ in range(3)]
    for p in ptrs:
        mem.free(p)
    # the whole arena is one free block again
    assert mem.malloc(15) == ptrs[0]


def test_rejects_non_positive_sizes():
    with pytest.raises(ValueError):
        LinearMemory().malloc(0)
