"""
TLE parsing for the SGP4/SDP4 propagator.

Provides pure-Python functions to parse two- and three-line element sets
into :class:`OrbitalElements`. Fields are read from their fixed columns the
way the legacy ``predict`` trackers read them, so the exponent sign of the
``nddot6`` and ``bstar`` fields is implied negative.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from satjax.sgp4._elements import create_orbital_elements
from satjax.sgp4._types import OrbitalElements

logger = logging.getLogger(__name__)

# Shortest line that still holds every field read by the parser
_MIN_LINE_LENGTH = 68


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> None:
    """Validate a TLE line's format and checksum.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).

    Raises:
        ValueError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) < 69:
        raise ValueError(
            f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}"
        )

    if line[0] != str(line_number):
        raise ValueError(f"TLE line {line_number} does not start with '{line_number}': {line}")

    checksum_char = line[68]
    if not checksum_char.isdigit():
        raise ValueError(f"TLE line {line_number} has non-digit checksum: {line}")

    expected = compute_checksum(line)
    actual = int(checksum_char)
    if expected != actual:
        raise ValueError(
            f"TLE line {line_number} checksum mismatch: computed {expected}, found {actual}: {line}"
        )


def _float_field(line: str, start: int, end: int, line_number: int, field: str) -> float:
    text = line[start:end]
    try:
        return float(text)
    except ValueError:
        raise ValueError(
            f"TLE line {line_number} field '{field}' is not numeric: {text!r}"
        ) from None


def _int_field(line: str, start: int, end: int, line_number: int, field: str) -> int:
    text = line[start:end].strip()
    try:
        return int(text)
    except ValueError:
        raise ValueError(
            f"TLE line {line_number} field '{field}' is not an integer: {text!r}"
        ) from None


def parse_tle(lines: Sequence[str], strict: bool = False) -> OrbitalElements:
    """Parse a two- or three-line element set.

    Args:
        lines: Either ``(line1, line2)`` or ``(name, line1, line2)``.
        strict: Also check the line numbers and modulo-10 checksums with
            :func:`validate_tle_line`.

    Returns:
        Pre-processed orbital elements.

    Raises:
        ValueError: If the set is ``None``, has the wrong number of lines,
            contains a ``None``, empty or short line, has a non-numeric
            field, or the catalog numbers of lines 1 and 2 differ.

    Examples:
        ```python
        from satjax.sgp4 import parse_tle

        elements = parse_tle([
            "AO-51 [+]",
            "1 28375U 04025K   09105.66391970  .00000003  00000-0  13761-4 0  3643",
            "2 28375 098.0551 118.9086 0084159 315.8041 043.6444 14.40638450251959",
        ])
        elements.catnum  # 28375
        ```
    """
    if lines is None:
        raise ValueError("TLE was None")

    lines = list(lines)
    if len(lines) not in (2, 3):
        raise ValueError(f"TLE had {len(lines)} lines, expected 2 or 3")

    for index, line in enumerate(lines):
        if line is None:
            raise ValueError(f"TLE line {index} was None")
        if len(line) == 0:
            raise ValueError(f"TLE line {index} was zero length")

    name = lines[0].strip() if len(lines) == 3 else ""
    l1 = lines[-2].rstrip()
    l2 = lines[-1].rstrip()

    if strict:
        validate_tle_line(l1, 1)
        validate_tle_line(l2, 2)

    for number, line in ((1, l1), (2, l2)):
        if len(line) < _MIN_LINE_LENGTH:
            raise ValueError(
                f"TLE line {number} is too short ({len(line)} chars, "
                f"expected at least {_MIN_LINE_LENGTH}): {line}"
            )

    catnum = _int_field(l1, 2, 7, 1, "catnum")
    if catnum != _int_field(l2, 2, 7, 2, "catnum"):
        raise ValueError("Object numbers in lines 1 and 2 do not match")

    # Mantissa with implied leading decimal point, exponent with implied minus sign
    nddot6 = 1.0e-5 * _float_field(l1, 44, 50, 1, "nddot6") / 10.0 ** _float_field(
        l1, 51, 52, 1, "nddot6 exponent"
    )
    bstar = 1.0e-5 * _float_field(l1, 53, 59, 1, "bstar") / 10.0 ** _float_field(
        l1, 60, 61, 1, "bstar exponent"
    )

    return create_orbital_elements(
        name=name,
        catnum=catnum,
        setnum=_int_field(l1, 64, 68, 1, "setnum"),
        year=_int_field(l1, 18, 20, 1, "year"),
        refepoch=_float_field(l1, 20, 32, 1, "refepoch"),
        drag=_float_field(l1, 33, 43, 1, "drag"),
        nddot6=nddot6,
        bstar=bstar,
        incl=_float_field(l2, 8, 16, 2, "incl"),
        raan=_float_field(l2, 17, 25, 2, "raan"),
        eccn=1.0e-7 * _float_field(l2, 26, 33, 2, "eccn"),
        argper=_float_field(l2, 34, 42, 2, "argper"),
        meanan=_float_field(l2, 43, 51, 2, "meanan"),
        meanmo=_float_field(l2, 52, 63, 2, "meanmo"),
        orbitnum=_int_field(l2, 63, 68, 2, "orbitnum"),
    )


def read_tles(stream: Iterable[str], strict: bool = False) -> list[OrbitalElements]:
    """Read consecutive three-line element sets from a text stream.

    Blank lines are skipped.

    Args:
        stream: Any iterable of text lines, e.g. an open file.
        strict: Passed through to :func:`parse_tle`.

    Returns:
        The parsed element sets in file order.

    Raises:
        ValueError: If the number of non-blank lines is not a multiple of
            three, or any set fails to parse.
    """
    lines = [line.rstrip("\r\n") for line in stream if line.strip()]
    if len(lines) % 3 != 0:
        raise ValueError(
            f"Expected a multiple of 3 non-blank lines, got {len(lines)}"
        )

    elements = [parse_tle(lines[i : i + 3], strict=strict) for i in range(0, len(lines), 3)]
    logger.info("Loaded %d element sets", len(elements))
    return elements
