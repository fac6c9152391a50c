"""
Summation parser.

Stages:
- header detection (optional //<delimiter>\\n prefix)
- tokenization on literal delimiters
- numeric coercion (malformed tokens are dropped, not rejected)
- negative validation + sum

No input length limit is enforced. Integer tokens of any length are exact;
fractional tokens go through float, so magnitudes past ~1.8e308 become inf.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Sequence, Tuple, Union

from charset_normalizer import from_bytes

from .errors import NegativeNumberError
from .logging_utils import create_logger
from .rules import DEFAULT_DELIMITERS, HEADER_PREFIX, LINE_DELIMITER, NUMBER_PATTERN, Number

logger = create_logger(__name__)


class ParsedInput(NamedTuple):
    delimiters: Tuple[str, ...]
    numbers_section: str
    custom_delimiter: Union[str, None] = None


def parse_input(text: str) -> ParsedInput:
    """
    Split an optional custom delimiter header off the input.

    Rules:
    - "//<delim>\\n<numbers>" declares one literal delimiter of any length;
      newline stays active alongside it.
    - "//\\n..." (empty delimiter) or a header with no newline is not a
      header: defaults apply to the whole original input.
    """
    if text.startswith(HEADER_PREFIX):
        newline_index = text.find(LINE_DELIMITER)
        if newline_index > len(HEADER_PREFIX):
            custom = text[len(HEADER_PREFIX):newline_index]
            logger.debug("custom delimiter %r", custom)
            return ParsedInput(
                delimiters=(custom, LINE_DELIMITER),
                numbers_section=text[newline_index + 1:],
                custom_delimiter=custom,
            )

    return ParsedInput(delimiters=DEFAULT_DELIMITERS, numbers_section=text)


def tokenize(text: str, delimiters: Sequence[str]) -> List[str]:
    """Split on any delimiter, matched literally. Empty tokens are kept."""
    pattern = "|".join(re.escape(d) for d in delimiters)
    return re.split(pattern, text)


def parse_number(token: str) -> Union[Number, None]:
    """Return the token's value, or None if it is not a plain decimal."""
    if not NUMBER_PATTERN.fullmatch(token):
        return None
    if "." not in token:
        # int(str) refuses tokens past sys.get_int_max_str_digits(); Decimal does not
        return int(Decimal(token))
    value = float(token)
    # 2.0 renders as "2", like an integer literal
    return int(value) if value.is_integer() else value


def to_numbers(tokens: Sequence[str]) -> Tuple[List[Number], List[str]]:
    """Coerce tokens to numbers; returns (values, dropped non-empty tokens)."""
    values: List[Number] = []
    dropped: List[str] = []

    for token in tokens:
        if not token:
            continue
        value = parse_number(token)
        if value is None:
            dropped.append(token)
            continue
        values.append(value)

    if dropped:
        logger.debug("dropped %d non-numeric token(s): %r", len(dropped), dropped)

    return values, dropped


def validate_no_negatives(values: Sequence[Number]) -> None:
    negatives = [v for v in values if v < 0]
    if negatives:
        raise NegativeNumberError(negatives)


def _total(values: Sequence[Number]) -> Number:
    try:
        total = sum(values)
    except OverflowError:
        # an int too large for float met a fractional value; no negatives remain
        return math.inf
    if isinstance(total, float) and total.is_integer():
        return int(total)
    return total


def _evaluate(text: str) -> Tuple[ParsedInput, List[str], List[Number], List[str]]:
    parsed = parse_input(text)
    tokens = tokenize(parsed.numbers_section, parsed.delimiters)
    values, dropped = to_numbers(tokens)
    validate_no_negatives(values)
    return parsed, tokens, values, dropped


def add(text: str) -> Number:
    """
    Sum the numbers in a delimited string.

    >>> add("1\\n2,3")
    6
    >>> add("//;\\n1;2")
    3

    Raises NegativeNumberError listing every negative value in input order.
    """
    if text == "":
        return 0

    _, _, values, _ = _evaluate(text)
    return _total(values)


def explain(text: str) -> Dict[str, Any]:
    """
    Same as add(), but returns the breakdown of how the total was reached.
    """
    if text == "":
        return {
            "total": 0,
            "delimiters": list(DEFAULT_DELIMITERS),
            "custom_delimiter": None,
            "tokens": [],
            "values": [],
            "dropped": [],
        }

    parsed, tokens, values, dropped = _evaluate(text)
    return {
        "total": _total(values),
        "delimiters": list(parsed.delimiters),
        "custom_delimiter": parsed.custom_delimiter,
        "tokens": tokens,
        "values": values,
        "dropped": dropped,
    }


def decode_text_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF line endings.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode fails, fall back to UTF-8 with replacement characters.
    - A UTF-8 BOM is stripped.
    - CRLF/CR -> LF, so "\\r" never ends up inside a token.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        text = raw.decode("utf-8", errors="replace")
        decode_used = "utf-8"
        decode_fallback = True

    text = text.lstrip("\ufeff")
    text = normalize_newlines(text)

    return text, {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def sum_text_bytes(raw: bytes) -> Dict[str, Any]:
    """
    Decode an uploaded file and sum it.
    Returns a dict matching the API's response envelope.
    """
    text, encoding = decode_text_bytes(raw)
    report = explain(text)
    report["encoding"] = encoding
    return {"total": report["total"], "report": report}
