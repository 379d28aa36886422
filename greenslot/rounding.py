"""
Rounding helpers. Halves always round up (towards +inf), never to even.
"""

import math


def round_half_up(value: float, ndigits: int = 0):
    """
    Round like a display layer would: 2.5 -> 3, -2.5 -> -2, 0.125 -> 0.13 (2 digits).

    Returns an int when ndigits is 0, otherwise a float.
    """
    if ndigits == 0:
        return int(math.floor(value + 0.5))
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale
