from color_journey.prng import XorShift128Plus


def test_same_seed_same_sequence():
    a = XorShift128Plus(42)
    b = XorShift128Plus(42)
    assert [a.next_u32() for _ in range(50)] == [b.next_u32() for _ in range(50)]


def test_different_seeds_differ():
    a = XorShift128Plus(1)
    b = XorShift128Plus(2)
    assert [a.next_u32() for _ in range(5)] != [b.next_u32() for _ in range(5)]


def test_ranges():
    rng = XorShift128Plus(12345)
    for _ in range(1000):
        assert 0 <= rng.next_u32() <= 0xFFFFFFFF
        assert 0.0 <= rng.random() < 1.0
        assert -1.0 <= rng.symmetric() < 1.0


def test_seed_is_taken_modulo_2_32():
    a = XorShift128Plus(7)
    b = XorShift128Plus(7 + (1 << 32))
    assert a.next_u32() == b.next_u32()


def test_roughly_uniform():
    rng = XorShift128Plus(99)
    vals = [rng.random() for _ in range(5000)]
    mean = sum(vals) / len(vals)
    assert 0.45 < mean < 0.55
