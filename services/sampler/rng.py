"""
Seed hashing and the seeded generator behind spot rolls.

Both work purely in unsigned 32-bit integer arithmetic so a given seed
string produces the same sequence on every platform (and matches the
browser build, which hashes JavaScript UTF-16 code units).
"""

from typing import Iterator

MASK_32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296


def _utf16_code_units(text: str) -> Iterator[int]:
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 + (cp >> 10)
            yield 0xDC00 + (cp & 0x3FF)
        else:
            yield cp


def hash_str_to_seed(text: str) -> int:
    """32-bit FNV-1a fold of a string"""
    h = FNV_OFFSET_BASIS
    for unit in _utf16_code_units(text):
        h ^= unit
        h = (h * FNV_PRIME) & MASK_32
    return h


class Mulberry32:
    """Counter-based 32-bit generator returning floats in [0, 1)"""

    def __init__(self, seed: int):
        self.state = seed & MASK_32

    def next_uint32(self) -> int:
        self.state = (self.state + MULBERRY_INCREMENT) & MASK_32
        t = self.state
        x = ((t ^ (t >> 15)) * (t | 1)) & MASK_32
        x ^= (x + (((x ^ (x >> 7)) * (x | 61)) & MASK_32)) & MASK_32
        return (x ^ (x >> 14)) & MASK_32

    def random(self) -> float:
        return self.next_uint32() / TWO_POW_32

    def __call__(self) -> float:
        return self.random()
