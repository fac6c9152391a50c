"""
String calculator rules.

Delimiters, header syntax and accepted number syntax live here so the
parser and the service agree on them.
"""

import math
import re
from decimal import Decimal
from typing import Union

Number = Union[int, float]

DEFAULT_DELIMITERS = (",", "\n")
LINE_DELIMITER = "\n"

HEADER_PREFIX = "//"  # //<delimiter>\n<numbers>

NEGATIVES_MESSAGE_PREFIX = "Negatives not allowed: "
NEGATIVES_SEPARATOR = ", "

# Plain decimal only: optional leading '-', no whitespace, exponent or '+'.
NUMBER_PATTERN = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")

TEXT_UPLOAD_SUFFIXES = (".txt",)


def format_number(value: Number) -> str:
    """
    Positional decimal text for a value: -2, -0.00001, never 1e-05.

    Goes through Decimal so integers of any length render without hitting
    the interpreter's int/str digit limit.
    """
    if isinstance(value, int):
        return str(Decimal(value))
    if not math.isfinite(value):
        return str(value)
    # repr() is the shortest round-tripping form
    return format(Decimal(repr(value)), "f")
