from __future__ import annotations

import os
import time
from uuid import UUID


def new_id() -> UUID:
    """Return a time-ordered UUID (version 7).

    The first 48 bits hold the unix timestamp in milliseconds, so ids sort by
    creation time; the remaining bits are random.
    """
    millis = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")
    value = (millis & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76  # version
    value |= ((rand >> 64) & 0x0FFF) << 64  # rand_a
    value |= 0b10 << 62  # variant
    value |= rand & 0x3FFF_FFFF_FFFF_FFFF  # rand_b
    return UUID(int=value)
