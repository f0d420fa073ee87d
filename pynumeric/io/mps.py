"""MPS reader for linear programs.

Reads free-format MPS (whitespace-separated fields) with the sections
NAME, ROWS, COLUMNS, RHS, BOUNDS and ENDATA, and produces the inequality
form consumed by :func:`pynumeric.convex.lp.solve_lp`:

```
    minimize    c^T x
    subject to  A x <= b
                Aeq x = beq
```

``L`` rows map to ``A`` directly, ``G`` rows are negated, ``E`` rows go to
``Aeq``. Variables are non-negative unless a BOUNDS entry says otherwise;
finite bounds become extra rows of ``A``. Only the first ``N`` row is used
as the objective and its RHS entry (an objective offset) is ignored.

Supported bound types: UP, LO, FX, FR, MI, PL, BV.
Unsupported features:
    - RANGES section
    - Integer markers (MARKER lines are skipped, variables stay continuous)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..logging import get_logger

logger = get_logger(__name__)

_SECTIONS = ("NAME", "ROWS", "COLUMNS", "RHS", "BOUNDS", "RANGES", "ENDATA", "OBJSENSE")


@dataclass
class MPSProblem:
    """
    Linear program read from an MPS file.

    Attributes:
        name: Problem name from the NAME record.
        c: Objective coefficients.
        A: Inequality matrix (``A x <= b``), including bound rows.
        b: Inequality right-hand side.
        Aeq: Equality matrix, or ``None`` when there are no ``E`` rows.
        beq: Equality right-hand side, or ``None``.
        row_names: Names of the rows of ``A`` then ``Aeq``; bound rows are
            named ``"<column>.lo"`` / ``"<column>.up"``.
        col_names: Variable names in column order.
    """

    name: str
    c: np.ndarray
    A: np.ndarray
    b: np.ndarray
    Aeq: Optional[np.ndarray]
    beq: Optional[np.ndarray]
    row_names: List[str]
    col_names: List[str]


def parse_mps(text: str) -> MPSProblem:
    """
    Parse the text of a free-format MPS file.

    Raises
    ------
    ValueError
        On unknown sections, row types or bound types, references to
        undeclared rows, or a RANGES section.
    """
    name = ""
    section: Optional[str] = None
    objective: Optional[str] = None
    row_types: Dict[str, str] = {}
    row_order: List[str] = []
    col_index: Dict[str, int] = {}
    entries: Dict[Tuple[str, int], float] = {}
    rhs: Dict[str, float] = {}
    lower: Dict[int, float] = {}
    upper: Dict[int, float] = {}

    def column(label: str) -> int:
        if label not in col_index:
            col_index[label] = len(col_index)
        return col_index[label]

    for lineno, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip() or raw.lstrip().startswith("*"):
            continue
        fields = raw.split()
        if not raw[0].isspace():
            head = fields[0].upper()
            if head not in _SECTIONS:
                raise ValueError(f"Line {lineno}: unknown MPS section {fields[0]!r}")
            if head == "RANGES":
                raise ValueError("MPS RANGES section is not supported")
            section = head
            if head == "NAME":
                name = fields[1] if len(fields) > 1 else ""
            if head == "ENDATA":
                break
            continue

        if section == "ROWS":
            kind, label = fields[0].upper(), fields[1]
            if kind not in ("N", "L", "G", "E"):
                raise ValueError(f"Line {lineno}: unknown row type {fields[0]!r}")
            if kind == "N":
                if objective is None:
                    objective = label
                row_types[label] = "N"
                continue
            row_types[label] = kind
            row_order.append(label)
        elif section == "COLUMNS":
            if "'MARKER'" in fields:
                continue
            j = column(fields[0])
            for row, value in zip(fields[1::2], fields[2::2]):
                if row not in row_types:
                    raise ValueError(f"Line {lineno}: column {fields[0]!r} refers to unknown row {row!r}")
                entries[(row, j)] = float(value)
        elif section == "RHS":
            pairs = fields[1:] if len(fields) % 2 == 1 else fields
            for row, value in zip(pairs[0::2], pairs[1::2]):
                if row not in row_types:
                    raise ValueError(f"Line {lineno}: RHS refers to unknown row {row!r}")
                rhs[row] = float(value)
        elif section == "BOUNDS":
            kind = fields[0].upper()
            j = column(fields[2])
            value = float(fields[3]) if len(fields) > 3 else 0.0
            if kind == "UP":
                upper[j] = value
            elif kind == "LO":
                lower[j] = value
            elif kind == "FX":
                lower[j] = upper[j] = value
            elif kind == "FR":
                lower[j] = -np.inf
                upper[j] = np.inf
            elif kind == "MI":
                lower[j] = -np.inf
            elif kind == "PL":
                upper[j] = np.inf
            elif kind == "BV":
                lower[j], upper[j] = 0.0, 1.0
            else:
                raise ValueError(f"Line {lineno}: unknown bound type {fields[0]!r}")
        elif section == "OBJSENSE":
            if fields[0].upper() not in ("MIN", "MINIMIZE"):
                raise ValueError("Only minimization problems are supported")
        else:
            raise ValueError(f"Line {lineno}: data outside of a section")

    n = len(col_index)
    col_names = sorted(col_index, key=col_index.get)
    c = np.zeros(n)
    ineq_rows: List[np.ndarray] = []
    ineq_rhs: List[float] = []
    ineq_names: List[str] = []
    eq_rows: List[np.ndarray] = []
    eq_rhs: List[float] = []
    eq_names: List[str] = []

    coeffs: Dict[str, np.ndarray] = {label: np.zeros(n) for label in row_types}
    for (row, j), value in entries.items():
        coeffs[row][j] = value
    if objective is not None:
        c = coeffs[objective]

    for label in row_order:
        kind = row_types[label]
        value = rhs.get(label, 0.0)
        if kind == "L":
            ineq_rows.append(coeffs[label])
            ineq_rhs.append(value)
            ineq_names.append(label)
        elif kind == "G":
            ineq_rows.append(-coeffs[label])
            ineq_rhs.append(-value)
            ineq_names.append(label)
        else:
            eq_rows.append(coeffs[label])
            eq_rhs.append(value)
            eq_names.append(label)

    for label in col_names:
        j = col_index[label]
        lo = lower.get(j, 0.0)
        hi = upper.get(j, np.inf)
        if np.isfinite(lo):
            row = np.zeros(n)
            row[j] = -1.0
            ineq_rows.append(row)
            ineq_rhs.append(-lo)
            ineq_names.append(f"{label}.lo")
        if np.isfinite(hi):
            row = np.zeros(n)
            row[j] = 1.0
            ineq_rows.append(row)
            ineq_rhs.append(hi)
            ineq_names.append(f"{label}.up")

    A = np.vstack(ineq_rows) if ineq_rows else np.zeros((0, n))
    Aeq = np.vstack(eq_rows) if eq_rows else None
    logger.debug(
        "parse_mps: %s with %d columns, %d inequalities, %d equalities",
        name or "<unnamed>", n, A.shape[0], len(eq_rows),
    )
    return MPSProblem(
        name=name,
        c=c,
        A=A,
        b=np.asarray(ineq_rhs, dtype=float),
        Aeq=Aeq,
        beq=np.asarray(eq_rhs, dtype=float) if eq_rows else None,
        row_names=ineq_names + eq_names,
        col_names=col_names,
    )


__all__ = ["MPSProblem", "parse_mps"]
