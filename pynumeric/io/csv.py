"""Comma-separated text parsing and formatting.

Fields are separated by commas and rows by newlines. Fields wrapped in
single or double quotes are kept as strings (without the quotes); any
other field that looks like a decimal number is converted to ``float``.
"""

from __future__ import annotations

import math
import re
from typing import List, Sequence, Union

import numpy as np

from ..core.arrays import as_matrix

Field = Union[float, str]

_FIELD = re.compile(r"""([^'",]*|'[^']*'|"[^"]*"),""")
_NUMBER = re.compile(
    r"^\s*(?:[+-]?[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?|[+-]?[0-9]*\.[0-9]+(?:[eE][+-]?[0-9]+)?)\s*$"
)


def _convert(token: str) -> Field:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"":
        return token[1:-1]
    if _NUMBER.match(token):
        return float(token)
    return token


def parse_csv(text: str) -> List[List[Field]]:
    """
    Parse comma-separated text into a list of rows.

    Parameters
    ----------
    text : str
        Input text; blank lines are skipped.

    Returns
    -------
    list of list
        One list per non-blank line holding floats and strings.
    """
    rows: List[List[Field]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        rows.append([_convert(m.group(1)) for m in _FIELD.finditer(line + ",")])
    return rows


def _format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(float(value))


def _format_field(value) -> str:
    if isinstance(value, str):
        if "\n" in value:
            raise ValueError("CSV fields cannot contain newlines")
        if any(ch in value for ch in ",\"'") or _NUMBER.match(value):
            quote = "'" if '"' in value else '"'
            if quote in value:
                raise ValueError(f"Cannot quote field containing both quote characters: {value!r}")
            return quote + value + quote
        return value
    return _format_number(float(value))


def to_csv(A: Union[np.ndarray, Sequence[Sequence[Field]]]) -> str:
    """
    Format a matrix (or a list of rows) as comma-separated text.

    Numeric rows are validated as a matrix; lists mixing strings and
    numbers are written row by row, quoting strings that would otherwise
    read back as numbers or break the field structure.
    """
    if isinstance(A, np.ndarray) or not any(
        isinstance(v, str) for row in A for v in row
    ):
        rows = as_matrix(A).tolist()
    else:
        rows = [list(row) for row in A]
    return "".join(",".join(_format_field(v) for v in row) + "\n" for row in rows)


__all__ = ["parse_csv", "to_csv"]
