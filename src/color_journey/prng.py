from __future__ import annotations

_MASK = 0xFFFFFFFF
_WARMUP = 8


class XorShift128Plus:
    """
    32-bit xorshift128+ (four 32-bit words, additive output).

    Every operation is masked to 32 bits so the sequence matches the compiled
    kernel draw for draw. Do not swap in ``random.Random``; stored palettes
    for a given seed depend on this exact sequence.
    """

    __slots__ = ("x", "y", "z", "w")

    def __init__(self, seed: int) -> None:
        self.x = (seed & _MASK) ^ 123456789
        self.y = 362436069
        self.z = 521288629
        self.w = 88675123
        for _ in range(_WARMUP):
            self.next_u32()

    def next_u32(self) -> int:
        t = (self.x ^ (self.x << 11)) & _MASK
        self.x, self.y, self.z = self.y, self.z, self.w
        self.w = (self.w ^ (self.w >> 19) ^ t ^ (t >> 8)) & _MASK
        return (self.w + self.y) & _MASK

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next_u32() / 4294967296.0

    def symmetric(self) -> float:
        """Uniform float in [-1, 1)."""
        return self.random() * 2.0 - 1.0


__all__ = ["XorShift128Plus"]
