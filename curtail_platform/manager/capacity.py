"""
Capacity guard for the 16-bit short-code namespace.

Collision chance among n codes drawn from a 2^bits space (birthday bound):

    p = 1 - e^-(n * (n - 1) / (2 * 2^bits))

With 64 links already stored, inserting the 65th has p ~= 3.1%, so a retry
budget of 1000 is never exhausted by ordinary bad luck. Past that point
creation is refused.

Known limitation:
    The namespace is not widened (e.g. to 24+ bits) once the threshold is
    reached; creation simply stops. The check is also read-then-act against
    a count with no transaction spanning the insert, so concurrent creations
    can overshoot the threshold by the number of racing requests. Both are
    accepted soft limits.

Widths and the link count at which p reaches 50%:

    bits | links
    -----|--------------
    16   |           301
    24   |         4,822
    32   |        77,162
    40   |     1,234,603
    48   |    19,753,662
"""

import logging
import math

from ..errors import CapacityExceeded

log = logging.getLogger("curtail.manager")

NAMESPACE_BITS = 16
CAPACITY_THRESHOLD = 65


def collision_probability(n: int, bits: int = NAMESPACE_BITS) -> float:
    """Birthday-bound probability of at least one collision among n codes."""
    if n < 2:
        return 0.0
    return 1.0 - math.exp(-(n * (n - 1)) / (2 * 2 ** bits))


def check_capacity(existing_count: int, threshold: int = CAPACITY_THRESHOLD) -> None:
    """
    Refuse allocation once existing_count reaches the threshold.

    Raises:
        CapacityExceeded: If existing_count >= threshold.
    """
    if existing_count >= threshold:
        log.warning(
            "Refusing link creation: %d links stored (limit %d for %d-bit codes, "
            "next insert collision chance %.1f%%); namespace widening is not implemented",
            existing_count,
            threshold,
            NAMESPACE_BITS,
            collision_probability(existing_count + 1) * 100,
        )
        raise CapacityExceeded(f"{existing_count} links stored, limit is {threshold}")
