"""
Python implementation of the xoshiro256+ PRNG.

Based on Blackman and Vigna's xoshiro256+ generator, seeded through
SplitMix64. All arithmetic is done on 64-bit unsigned integers, so the
stream is identical on every platform and interpreter build.
"""

from bisect import bisect_right

MASK64 = 0xFFFFFFFFFFFFFFFF


def _uint64(n):
    """Convert to unsigned 64-bit integer."""
    return n & MASK64


def _rotl(x, k):
    return _uint64((x << k) | (x >> (64 - k)))


def splitmix64(state):
    """Advance a SplitMix64 state. Returns (new_state, output)."""
    state = _uint64(state + 0x9E3779B97F4A7C15)
    z = state
    z = _uint64((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9)
    z = _uint64((z ^ (z >> 27)) * 0x94D049BB133111EB)
    return state, z ^ (z >> 31)


class Xoshiro256Plus:
    """
    xoshiro256+ PRNG with helpers for the draws used by generation.

    Never share one instance between independently ordered work; use
    fork() to hand each stage its own generator.
    """

    def __init__(self, state):
        """Initialize with four 64-bit state words (not all zero)."""
        state = [_uint64(int(s)) for s in state]
        if len(state) != 4:
            raise ValueError("xoshiro256+ needs exactly 4 state words")
        if not any(state):
            raise ValueError("xoshiro256+ state must not be all zero")
        self.s = state
        self.call_count = 0

    @classmethod
    def seed_from_u64(cls, seed):
        """Expand a 64-bit seed into a full state with SplitMix64."""
        state = _uint64(seed)
        words = []
        for _ in range(4):
            state, out = splitmix64(state)
            words.append(out)
        return cls(words)

    @classmethod
    def from_seed(cls, seed_bytes):
        """Initialize from 32 seed bytes (four little-endian words)."""
        seed_bytes = bytes(seed_bytes)
        if len(seed_bytes) != 32:
            raise ValueError(f"Expected 32 seed bytes, got {len(seed_bytes)}")
        words = [
            int.from_bytes(seed_bytes[i : i + 8], "little") for i in range(0, 32, 8)
        ]
        if not any(words):
            return cls.seed_from_u64(0)
        return cls(words)

    def fork(self):
        """Derive an independent child generator from the next 256 bits."""
        words = [self.next_u64() for _ in range(4)]
        if not any(words):
            return Xoshiro256Plus.seed_from_u64(0)
        return Xoshiro256Plus(words)

    def next_u64(self):
        """Generate the next 64-bit output."""
        self.call_count += 1
        s0, s1, s2, s3 = self.s
        result = _uint64(s0 + s3)
        t = _uint64(s1 << 17)

        s2 ^= s0
        s3 ^= s1
        s1 ^= s2
        s0 ^= s3
        s2 ^= t
        s3 = _rotl(s3, 45)

        self.s = [s0, s1, s2, s3]
        return result

    def next_u32(self):
        # The low bits of xoshiro256+ are weak, keep the upper half
        return self.next_u64() >> 32

    def random(self):
        """Generate next random number in [0, 1) with 53 bits of precision."""
        return (self.next_u64() >> 11) * (1.0 / 9007199254740992.0)  # 2^-53

    def uniform(self, low, high):
        """Uniform float in [low, high)."""
        return low + (high - low) * self.random()

    def randrange(self, low, high):
        """Unbiased integer in [low, high) using Lemire's widening multiply."""
        span = high - low
        if span <= 0:
            raise ValueError(f"Empty range [{low}, {high})")
        if span > MASK64:
            raise ValueError("Range wider than 64 bits")

        threshold = (1 << 64) % span
        while True:
            m = self.next_u64() * span
            if (m & MASK64) >= threshold:
                return low + (m >> 64)

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randrange(0, len(seq))]

    def sample(self, seq, k):
        """
        Choose k distinct elements without replacement.

        Partial Fisher-Yates shuffle over a copy; elements come back in
        selection order.
        """
        pool = list(seq)
        if k < 0 or k > len(pool):
            raise ValueError(f"Sample size {k} out of range for {len(pool)} items")
        for i in range(k):
            j = self.randrange(i, len(pool))
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:k]

    def choice_weighted(self, items, weights):
        """Choose one item with probability proportional to its weight."""
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")

        cumulative = []
        total = 0.0
        for w in weights:
            if w < 0:
                raise ValueError(f"Negative weight {w}")
            total += w
            cumulative.append(total)
        if total <= 0:
            raise ValueError("At least one weight must be positive")

        target = self.random() * total
        idx = bisect_right(cumulative, target)
        # Guard against float rounding landing exactly on the total
        return items[min(idx, len(items) - 1)]
