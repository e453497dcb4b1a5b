"""
Utilities for parsing human-readable memory sizes.
"""
import re
from decimal import Decimal
from typing import Union

_UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "m": 1024 ** 2,
    "g": 1024 ** 3,
    "t": 1024 ** 4,
}

# 512, 512m, 1.5g, 100mb, 2GiB
_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([bkmgt]?)(?:i?b)?\s*$', re.IGNORECASE)


def parse_bytes(value: Union[int, str]) -> int:
    """
    Converts a memory size into a number of bytes.

    Integers are taken as bytes. Strings may carry a binary suffix
    (b, k, m, g, t, optionally followed by "b" or "ib"). -1 is passed
    through, it means "unlimited" for swap.

    :param value: The size to convert.
    :return: The size in bytes.
    :raises ValueError: If the value is not a recognizable size.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid memory size: {value!r}")
    if isinstance(value, int):
        if value < -1:
            raise ValueError(f"Memory size cannot be negative: {value}")
        return value

    if str(value).strip() == "-1":
        return -1

    match = _SIZE_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid memory size: {value!r}")

    number, unit = match.groups()
    multiplier = _UNITS[unit.lower()]
    if "." not in number:
        return int(number) * multiplier
    if multiplier == 1:
        raise ValueError(f"Memory size cannot be a fraction of a byte: {value!r}")
    # 1.1k is 1126.4 bytes, truncated to 1126
    return int(Decimal(number) * multiplier)
