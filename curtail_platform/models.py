"""
Link data model.

A Link is created once by the allocation controller and never updated or
deleted. Values handed to callers are plain frozen dataclasses with no
reference back to the store that produced them.
"""

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class Link:
    """A persisted short-code -> target mapping.

    Attributes:
        record_id (str): Time-ordered 128-bit identifier (hyphenated UUID string).
        short_code (str): Base58 code derived from the low bits of record_id.
        target (str): Destination URL (http/https, 1-3072 bytes).
    """
    record_id: str
    short_code: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
