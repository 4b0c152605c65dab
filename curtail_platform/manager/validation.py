"""
Target URL validation.

Pure checks run before any identifier generation or store access. Rules are
applied in order and the first failure wins:

    1. non-empty                      -> EmptyTarget
    2. encodable as UTF-8, no NUL     -> MalformedTarget
    3. UTF-8 length <= 3072 bytes     -> TargetTooLong
    4. starts with http:// or https:// (any case) -> BadProtocol

3072 bytes is below what RFCs allow but matches what most CDNs accept.
PostgreSQL text columns cannot hold NUL, so it is refused here rather than
surfacing later as a store fault.
"""

import re

from ..errors import BadProtocol, EmptyTarget, MalformedTarget, TargetTooLong

MAX_TARGET_BYTES = 3072

_PROTOCOL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def validate_target(target: str) -> None:
    """
    Validate a candidate target URL.

    Raises:
        EmptyTarget: If target is empty.
        MalformedTarget: If target holds lone surrogates or NUL characters.
        TargetTooLong: If the UTF-8 encoding exceeds MAX_TARGET_BYTES.
        BadProtocol: If target does not begin with http:// or https://.
    """
    if not target:
        raise EmptyTarget()

    try:
        encoded = target.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedTarget(f"target is not valid UTF-8: {e.reason}") from e
    if b"\x00" in encoded:
        raise MalformedTarget("target contains a NUL character")

    if len(encoded) > MAX_TARGET_BYTES:
        raise TargetTooLong(f"target is {len(encoded)} bytes (max {MAX_TARGET_BYTES})")

    if not _PROTOCOL_PATTERN.match(target):
        raise BadProtocol()
