# garbler.py
# Garbler: keyed, reversible text garbling (shuffle + perturb)
# Author: garbler maintainers
# Project: garbler (see pyproject.toml)
#
# garble() makes a string look like gibberish; degarble() with the same key gets
# the original back. Keys may be a key text, a 64-bit int, or a list of ints.
#
#  1) Key text -> 64-bit seed via hash64 + golden-ratio XOR + avalanche mix
#  2) Counter-based stream: word_at(seed, p) is a pure function of (seed, p),
#     so the inverse pass can walk the forward stream backward in O(1) per step
#  3) Forward pass = Fisher-Yates shuffle interleaved with an XOR perturbation
#     that never touches bit 0x20 (case / space shape survives garbling)
#
# NOTE: This is NOT encryption. It only stops casual reading / editing of saved
# text. Degarbling with the wrong key does not fail: it returns a same-length
# string that is simply wrong. Use garble_checked()/degarble_checked() when a
# mismatch must be detected.

from __future__ import annotations

import logging
from collections import abc
from dataclasses import dataclass
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

KeyLike = Union[None, str, int, Sequence[int]]


# ============================================================
# 64-bit arithmetic + mixers
# ============================================================

MASK64 = (1 << 64) - 1

GOLDEN_GAMMA = 0x9E3779B97F4A7C15

FNV_OFFSET = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3

DEFAULT_KEY_TEXT = "HOWARD PHILLIPS LOVECRAFT, EVERYBODY!"


def u64(x: int) -> int:
    return x & MASK64


def splitmix64(z: int) -> int:
    z = u64(z)
    z = u64((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9)
    z = u64((z ^ (z >> 27)) * 0x94D049BB133111EB)
    return z ^ (z >> 31)


def determine(x: int) -> int:
    """Avalanche mix used to turn a string hash into a seed."""
    x = u64(u64(x) * GOLDEN_GAMMA)
    x = u64((x ^ (x >> 26)) * 0x2545F4914F6CDD1D)
    return x ^ (x >> 28)


# ============================================================
# KeyDerivation
# ============================================================

def _fnv_units(text: str, h: int) -> int:
    for c in text:
        cp = ord(c)
        h = u64((h ^ (cp & 0xFF)) * FNV_PRIME)
        h = u64((h ^ (cp >> 8)) * FNV_PRIME)
    return h


def hash64(text: str) -> int:
    """64-bit FNV-style hash over the code units of text (low byte, then high bits)."""
    return _fnv_units(text, FNV_OFFSET)


def derive_key(key_text: str) -> int:
    if not isinstance(key_text, str):
        raise TypeError(f"key_text must be str, not {type(key_text).__name__}")
    return determine(hash64(key_text) ^ GOLDEN_GAMMA)


# ============================================================
# StreamCursor (counter-based, randomly addressable)
# ============================================================

def word_at(seed: int, position: int) -> int:
    # position may be negative or far past anything visited; u64 wraps it
    return splitmix64(seed + position * GOLDEN_GAMMA)


class StreamCursor:
    """
    Walks the word stream of one seed. Only the position is state; the word
    at any position is recomputed from (seed, position).

    next() advances by one and returns the word there, so the k-th word drawn
    from a fresh cursor is word_at(seed, k) and skip(k) on a fresh cursor
    lands on that same word.
    """

    __slots__ = ("seed", "position")

    def __init__(self, seed: int, position: int = 0):
        self.seed = u64(seed)
        self.position = position

    def next(self) -> int:
        self.position += 1
        return word_at(self.seed, self.position)

    def skip(self, delta: int) -> int:
        self.position += delta
        return word_at(self.seed, self.position)

    def __repr__(self) -> str:
        return f"StreamCursor(seed=0x{self.seed:016X}, position={self.position})"


# ============================================================
# Per-step decisions
# ============================================================

def map_index(word: int, bound: int) -> int:
    """Multiply-shift scaling of the low 31 bits of word into [0, bound]."""
    return ((word & 0x7FFFFFFF) * (bound + 1)) >> 31


def perturbation_mask(word: int) -> int:
    # shift is 49..63 depending on the top 3 bits; bit 0x20 is always clear
    shift = 49 + 2 * (u64(word) >> 61)
    return (u64(word) >> shift) & ~0x20


def apply_step(buf: List[int], i: int, r: int, mask: int) -> None:
    c = buf[r]
    buf[r] = buf[i]
    buf[i] = c ^ mask


def undo_step(buf: List[int], i: int, r: int, mask: int) -> None:
    if i == r:
        buf[i] ^= mask
        return
    c = buf[r]
    buf[r] = buf[i] ^ mask
    buf[i] = c


# ============================================================
# Garble / Degarble passes (in place, one seed)
# ============================================================

def garble_units(buf: List[int], seed: int) -> None:
    n = len(buf)
    if n == 0:
        return

    cursor = StreamCursor(seed)
    for i in range(n - 1, 0, -1):
        word = cursor.next()
        apply_step(buf, i, map_index(word, i), perturbation_mask(word))

    word = cursor.next()
    buf[0] ^= perturbation_mask(word)


def degarble_units(buf: List[int], seed: int) -> None:
    n = len(buf)
    if n == 0:
        return

    cursor = StreamCursor(seed)
    word = cursor.skip(n)
    buf[0] ^= perturbation_mask(word)

    for i in range(1, n):
        word = cursor.skip(-1)
        undo_step(buf, i, map_index(word, i), perturbation_mask(word))


# ============================================================
# Key handling
# ============================================================

def _resolve_keys(key: KeyLike) -> List[int]:
    if key is None:
        return [derive_key(DEFAULT_KEY_TEXT)]
    if isinstance(key, str):
        return [derive_key(key)]
    if isinstance(key, bool):
        raise TypeError("key must be str, int or a sequence of ints, not bool")
    if isinstance(key, int):
        return [u64(key)]
    if not isinstance(key, abc.Sequence) or isinstance(key, (bytes, bytearray)):
        raise TypeError(f"key must be str, int or a sequence of ints, not {type(key).__name__}")

    keys: List[int] = []
    for k in key:
        if not isinstance(k, int) or isinstance(k, bool):
            raise TypeError(f"key sequence items must be int, not {type(k).__name__}")
        keys.append(u64(k))
    return keys


def _check_text(text: str, name: str) -> None:
    if not isinstance(text, str):
        raise TypeError(f"{name} must be str, not {type(text).__name__}")


# ============================================================
# Public API
# ============================================================

def garble(text: str, key: KeyLike = None) -> str:
    """
    Garbles text so it looks like gibberish. The result has the same length
    and can be reversed with degarble() given the same key.

    key may be None (DEFAULT_KEY_TEXT), a key text, a 64-bit int, or a
    sequence of ints (garbled once per key, in order).
    """
    _check_text(text, "text")
    keys = _resolve_keys(key)

    buf = [ord(c) for c in text]
    for seed in keys:
        garble_units(buf, seed)

    logger.debug("garbled %d units with %d key(s)", len(buf), len(keys))
    return "".join(map(chr, buf))


def degarble(garbled: str, key: KeyLike = None) -> str:
    """
    Reverses garble() made with the same key. A wrong key (or text that was
    never garbled) gives a same-length wrong string, not an error.
    """
    _check_text(garbled, "garbled")
    keys = _resolve_keys(key)

    buf = [ord(c) for c in garbled]
    for seed in reversed(keys):
        degarble_units(buf, seed)

    logger.debug("degarbled %d units with %d key(s)", len(buf), len(keys))
    return "".join(map(chr, buf))


# ============================================================
# Key arrays (multi-key garbling from one key text)
# ============================================================

KEY_ARRAY_STEP = 0xB9A2842F


def seeded_hash64(text: str, variant: int) -> int:
    """One of 32 differently-seeded variants of hash64 (variant is taken mod 32)."""
    basis = splitmix64(FNV_OFFSET ^ u64((variant & 31) * GOLDEN_GAMMA))
    return _fnv_units(text, basis)


def make_key_array(size: int, key_text: str) -> List[int]:
    """
    Derives size decorrelated 64-bit keys from key_text, for use as the key
    sequence of garble()/degarble(). Key texts of 8+ chars work best.
    """
    if not isinstance(key_text, str):
        raise TypeError(f"key_text must be str, not {type(key_text).__name__}")
    if size < 0:
        raise ValueError(f"size must be >= 0 (got {size})")

    if size <= 1:
        return [seeded_hash64(key_text, len(key_text) & 31)]

    keys: List[int] = []
    ctr = len(key_text) * 181 + KEY_ARRAY_STEP
    for _ in range(size):
        k = seeded_hash64(key_text, splitmix64(ctr) & 31)
        ctr = u64(ctr + k + KEY_ARRAY_STEP)
        keys.append(k ^ ctr)
    return keys


# ============================================================
# Checked garbling (outer integrity check)
# ============================================================

CHECK_LEN = 4
CHECK_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789+/"
)
if len(CHECK_ALPHABET) != 64:
    raise RuntimeError(f"CHECK_ALPHABET must be exactly 64 chars (got {len(CHECK_ALPHABET)})")


@dataclass
class VerifiedResult:
    ok: bool
    value: str


def _fold_seeds(keys: Sequence[int]) -> int:
    s = GOLDEN_GAMMA
    for k in keys:
        s = determine(s ^ k)
    return s


def _resolve_checked_keys(key: KeyLike) -> List[int]:
    keys = _resolve_keys(key)
    if not keys:
        # an empty sequence garbles nothing, so the check chars would sit in plain text
        raise ValueError("checked garbling needs at least one key")
    return keys


def make_check(text: str, key: KeyLike = None) -> str:
    chk = determine(hash64(text) ^ _fold_seeds(_resolve_checked_keys(key)))
    return "".join(CHECK_ALPHABET[(chk >> (6 * j)) & 63] for j in range(CHECK_LEN))


def garble_checked(text: str, key: KeyLike = None) -> str:
    """
    garble() of text + CHECK_LEN check chars; the output is CHECK_LEN chars longer.
    An empty key sequence raises ValueError.
    """
    _check_text(text, "text")
    _resolve_checked_keys(key)
    return garble(text + make_check(text, key), key)


def degarble_checked(garbled: str, key: KeyLike = None) -> VerifiedResult:
    """
    Reverses garble_checked(). Mismatched keys or damaged text give
    VerifiedResult(False, ""); only argument errors raise.
    """
    _check_text(garbled, "garbled")
    _resolve_checked_keys(key)
    if len(garbled) < CHECK_LEN:
        return VerifiedResult(False, "")

    plain = degarble(garbled, key)
    body, given = plain[:-CHECK_LEN], plain[-CHECK_LEN:]
    if make_check(body, key) != given:
        logger.debug("check mismatch on %d units", len(garbled))
        return VerifiedResult(False, "")
    return VerifiedResult(True, body)
