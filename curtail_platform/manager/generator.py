"""
Short-code generation for curtail_platform.

Provided pieces:
- b58encode: bytes -> Base58 string (Bitcoin alphabet, leading zero bytes -> "1")
- TimeOrderedGenerator: fresh UUIDv7-layout record id + Base58 code from its low bits
- BaseGenerator: injection seam used by LinkManager (tests swap in colliding generators)

Record id layout (128 bits, RFC 9562 version 7):

    | 48 bits unix_ts_ms | 4 ver=7 | 12 bits counter | 2 var | 62 bits random |

The 12-bit counter keeps ids strictly increasing when several are drawn in the
same millisecond (or when the wall clock steps backwards). The short code is
taken from the last NAMESPACE_BITS of the id, which sit inside the random
tail, so codes are uniformly spread over the namespace.

Notes:
- With NAMESPACE_BITS = 16 there are at most 65,536 distinct codes; collisions
  between independently generated codes are expected and are resolved by the
  store's unique index plus retry in LinkManager.
- The generator never looks at the store.
"""

import secrets
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Tuple

from .capacity import NAMESPACE_BITS

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_BASE = len(_BASE58_ALPHABET)

_COUNTER_BITS = 12
_MAX_COUNTER = (1 << _COUNTER_BITS) - 1
_RAND_B_BITS = 62
_MAX_CODE_BITS = 56


def b58encode(data: bytes) -> str:
    """
    Encode bytes as Base58.

    Each leading zero byte becomes one "1" so distinct inputs of the same
    length never share an encoding: b"\\x00\\x00" -> "11", b"\\x00\\x01" -> "12".
    """
    stripped = data.lstrip(b"\0")
    pad = len(data) - len(stripped)
    num = int.from_bytes(stripped, "big")
    out = []
    while num > 0:
        num, rem = divmod(num, _BASE58_BASE)
        out.append(_BASE58_ALPHABET[rem])
    return _BASE58_ALPHABET[0] * pad + "".join(reversed(out))


def _check_bits(bits: int) -> None:
    """Widths must be whole bytes inside the 56 fully random low bits of the id."""
    if bits % 8 or not 8 <= bits <= _MAX_CODE_BITS:
        raise ValueError(f"code width must be a multiple of 8 between 8 and {_MAX_CODE_BITS}, got {bits}")


def short_code_for(record_id: uuid.UUID, bits: int = NAMESPACE_BITS) -> str:
    """Derive the public short code from the low `bits` of a record id."""
    _check_bits(bits)
    return b58encode(record_id.bytes[-(bits // 8):])


class BaseGenerator(ABC):
    """Abstract base for (record_id, short_code) generators."""

    @abstractmethod
    def generate(self) -> Tuple[str, str]:  # pragma: no cover
        """Return a fresh (record_id, short_code) pair."""
        raise NotImplementedError


@dataclass
class TimeOrderedGenerator(BaseGenerator):
    """
    Thread-safe UUIDv7 generator with monotonic ordering inside one process.

    Attributes:
        bits: Namespace width sliced from the id to form the short code; whole
            bytes from 8 to 56, otherwise ValueError.
    """
    bits: int = NAMESPACE_BITS
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _last_ms: int = field(default=-1, repr=False)
    _counter: int = field(default=0, repr=False)

    def __post_init__(self):
        _check_bits(self.bits)

    def _now_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def next_id(self) -> uuid.UUID:
        """Return a new version 7 UUID greater than every previous one."""
        with self._lock:
            now = self._now_ms()
            if now > self._last_ms:
                self._last_ms = now
                # Start low in the counter range to leave headroom for bursts.
                self._counter = secrets.randbits(_COUNTER_BITS - 1)
            else:
                self._counter += 1
                if self._counter > _MAX_COUNTER:
                    self._last_ms += 1
                    self._counter = 0
            ms, counter = self._last_ms, self._counter

        value = (ms & ((1 << 48) - 1)) << 80
        value |= 0x7 << 76
        value |= counter << 64
        value |= 0b10 << 62
        value |= secrets.randbits(_RAND_B_BITS)
        return uuid.UUID(int=value)

    def generate(self) -> Tuple[str, str]:
        record_id = self.next_id()
        return str(record_id), short_code_for(record_id, self.bits)
