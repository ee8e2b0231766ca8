"""Pseudo random generators and shared state used by the Wolf RPG ciphers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, MutableSequence, Sequence

_M32 = 0xFFFFFFFF


class MsvcRandom:
    """Linear congruential generator compatible with the MSVC ``rand``."""

    def __init__(self, seed: int = 1) -> None:
        self._state = 0
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Restart the sequence from ``seed``."""
        self._state = seed & _M32

    def rand(self) -> int:
        """Return the next value in the range 0..0x7FFF."""
        self._state = (self._state * 214013 + 2531011) & _M32
        return (self._state >> 16) & 0x7FFF


class MT19937:
    """32-bit Mersenne Twister seeded the way ``std::mt19937`` is."""

    _N = 624
    _M = 397

    def __init__(self, seed: int = 5489) -> None:
        mt = [seed & _M32]
        for i in range(1, self._N):
            prev = mt[-1]
            mt.append((1812433253 * (prev ^ (prev >> 30)) + i) & _M32)
        self._mt = mt
        self._index = self._N

    def _twist(self) -> None:
        mt = self._mt
        n = self._N
        for i in range(n):
            y = (mt[i] & 0x80000000) | (mt[(i + 1) % n] & 0x7FFFFFFF)
            value = mt[(i + self._M) % n] ^ (y >> 1)
            if y & 1:
                value ^= 0x9908B0DF
            mt[i] = value
        self._index = 0

    def next(self) -> int:
        """Return the next 32-bit output."""
        if self._index >= self._N:
            self._twist()
        y = self._mt[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _M32

    def __iter__(self) -> "MT19937":
        return self

    def __next__(self) -> int:
        return self.next()


def _empty_rng_table() -> List[List[int]]:
    return [[0] * RngData.INNER_VEC_LEN for _ in range(RngData.OUTER_VEC_LEN)]


@dataclass
class RngData:
    """State of the custom generator chain."""

    OUTER_VEC_LEN: ClassVar[int] = 0x20
    INNER_VEC_LEN: ClassVar[int] = 0x100
    DATA_VEC_LEN: ClassVar[int] = 0x30

    seed1: int = 0
    seed2: int = 0
    counter: int = 0
    data: List[List[int]] = field(default_factory=_empty_rng_table)

    def reset(self) -> None:
        """Zero the seeds, the counter and the whole table."""
        self.seed1 = 0
        self.seed2 = 0
        self.counter = 0
        for row in self.data:
            row[:] = [0] * len(row)


@dataclass
class CryptData:
    """Values derived from a game data file while a key is worked out."""

    key_bytes: List[int] = field(default_factory=lambda: [0] * 4)
    seed_bytes: List[int] = field(default_factory=lambda: [0] * 4)
    game_dat_bytes: bytearray = field(default_factory=bytearray)
    data_size: int = 0
    seed1: int = 0
    seed2: int = 0


def custom_rng1(rd: RngData) -> int:
    """Advance ``rd.seed1`` with the first custom generator."""
    seed1 = rd.seed1
    shifted = (seed1 << 11) & _M32
    seed_p1 = seed1 ^ ((shifted ^ seed1) >> 8)
    seed = shifted ^ seed_p1

    state = (1664525 * seed + 1013904223) & _M32

    if ((13 * seed_p1 + 95) & 1) == 0:
        state_mod = state >> 3
    else:
        state_mod = (state * 4) & _M32

    state ^= state_mod

    if state & 0x400:
        state ^= (state << 21) & _M32
        state_mod = state >> 9
    else:
        state ^= (state * 4) & _M32
        state_mod = state >> 22

    state ^= state_mod

    if (state & 0xFFFFF) == 0:
        state = (state + 256) & _M32

    rd.seed1 = state
    return state


def custom_rng2(rd: RngData) -> int:
    """Advance ``rd.seed1`` with the second custom generator."""
    seed = rd.seed1
    state = (1664525 * seed + 1013904223) & _M32
    state_mod = (seed & 7) + 1

    remainder = state % 3
    if remainder == 0:
        state ^= (state << state_mod) & _M32
    elif remainder == 1:
        state ^= state >> state_mod
    else:
        state = ((~state & _M32) + ((state << state_mod) & _M32)) & _M32

    if state:
        if (state & 0xFFFF) == 0:
            state ^= 0x55AA55AA
    else:
        state = 0x173BEF

    rd.seed1 = state
    return state


def custom_rng3(rd: RngData) -> int:
    """Advance ``rd.seed2`` with the third custom generator."""
    seed = rd.seed2
    state = ((1566083941 * seed) ^ (292331520 * seed)) & _M32
    state ^= (state >> 17) ^ ((32 * (state ^ (state >> 17))) & _M32)
    state &= _M32
    state = (69069 * (state ^ ((state ^ (state >> 11)) & 0x3FFFFFFF))) & _M32

    if state:
        if (state & 0xFFFF) == 0:
            state ^= 0x59A6F141
        if (state & 0xFFFFF) == 0:
            state = (state + 256) & _M32
    else:
        state = 1566083941

    rd.seed2 = state
    return state


def rng_chain(rd: RngData, data: MutableSequence[int]) -> None:
    """Fill ``data`` in place with values from the generator chain."""
    for i, _ in enumerate(data):
        rn = custom_rng2(rd)
        d = rn ^ custom_rng3(rd)

        rd.counter = (rd.counter + 1) & _M32
        if (rd.counter & 1) == 0:
            d = (d + custom_rng3(rd)) & _M32

        c = rd.counter

        if c % 3 == 0:
            d ^= (custom_rng1(rd) + 3) & _M32
        if c % 7 == 0:
            d = (d + custom_rng3(rd) + 1) & _M32
        if (c & 7) == 0:
            d = (d * custom_rng1(rd)) & _M32
        if ((i + rd.seed1) & _M32) % 5 == 0:
            d ^= custom_rng1(rd)
        if c % 9 == 0:
            d = (d + custom_rng2(rd) + 4) & _M32
        if c % 0x18 == 0:
            d = (d + custom_rng2(rd) + 7) & _M32
        if c % 0x1F == 0:
            d = (d + 3 * custom_rng3(rd)) & _M32
        if c % 0x3D == 0:
            d = (d + custom_rng3(rd) + 1) & _M32
        if c % 0xA1 == 0:
            d = (d + custom_rng2(rd)) & _M32
        if (rn & 0xFFFF) == 256:
            d = (d + 3 * custom_rng3(rd)) & _M32

        data[i] = d


def a_lot_of_rng_stuff(
    rd: RngData, a2: int, a3: int, idx: int, crypt_data: MutableSequence[int]
) -> None:
    """Mix generator output into the byte ``crypt_data[idx]`` (and others)."""
    a2 &= _M32
    a3 &= _M32
    itrs = 20
    i = 0

    while i < itrs:
        idx1 = (a2 ^ custom_rng1(rd)) & 0x1F
        idx2 = (a3 ^ custom_rng2(rd)) & 0xFF
        a3 = rd.data[idx1][idx2]

        case = ((a2 + rd.counter) & _M32) % 0x14
        if case == 1:
            rng_chain(rd, rd.data[(a2 + 5) & 0x1F])
        elif case == 2:
            a3 ^= custom_rng1(rd)
        elif case == 5:
            if (a2 & 0xFFFFF) == 0:
                crypt_data[idx] = (crypt_data[idx] ^ custom_rng3(rd)) & 0xFF
        elif case in (9, 0xE):
            target = custom_rng2(rd) % 0x30
            crypt_data[target] = (crypt_data[target] + a3) & 0xFF
        elif case == 0xB:
            crypt_data[idx] = (crypt_data[idx] ^ custom_rng1(rd)) & 0xFF
        elif case == 0x11:
            itrs += 1
        elif case == 0x13:
            if (a2 & 0xFFFF) == 0:
                crypt_data[idx] = (crypt_data[idx] ^ custom_rng2(rd)) & 0xFF

        a2 = (a2 + custom_rng3(rd)) & _M32
        itrs = min(itrs, 50)
        i += 1

    crypt_data[idx] = (crypt_data[idx] + a3) & 0xFF


def run_rng_chain(rd: RngData, seed1: int, seed2: int) -> None:
    """Seed ``rd`` and fill every row of its table."""
    rd.seed1 = seed1 & _M32
    rd.seed2 = seed2 & _M32
    rd.counter = 0
    for row in rd.data:
        rng_chain(rd, row)


def is_v35(crypt_version: int) -> bool:
    """Tell whether a crypt version uses the 3.5 family of algorithms."""
    return (0x15E <= crypt_version < 0x3E8) or crypt_version >= 0x3FC


def gen_mt_seed(seeds: Sequence[int]) -> int:
    """Build a Mersenne Twister seed from three bytes."""
    if len(seeds) != 3:
        raise ValueError("exactly three seed bytes are required")
    x = ((seeds[0] & 0xFF) << 16) | ((seeds[1] & 0xFF) << 8) | (seeds[2] & 0xFF)
    y = ((x << 13) & _M32) ^ x
    z = (y >> 17) ^ y
    return (z ^ (z << 5)) & _M32