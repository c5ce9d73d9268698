"""Convert time-of-day bracket codes to minutes after midnight.

JWAP (arrival at work) and JWDP (departure for work) are published as codes
whose labels are clock-time brackets, e.g.

    "1" -> "12:00 a.m. to 12:04 a.m."
    "2" -> "12:05 a.m. to 12:09 a.m."

Each bracket ends one minute before the next one starts. The reference built
here lays the brackets end to end from midnight, keeping that one-minute gap,
and stores the midpoint of each bracket.
"""

import re
from datetime import timedelta

from .decode import code_to_int
from .errors import DomainError, ParseError


CLOCK_TIME = re.compile(r'(\d{1,2}):(\d{2})(?:\s*([ap])\.?\s*m\b\.?)?', re.IGNORECASE)
ONE_DAY = timedelta(days=1)


# === Functional Core (Pure Functions - No I/O) ===

def to_clock_time(hour, minute, meridiem=None):
    """Convert clock fields to a timedelta since midnight.

    Args:
        hour: Hour as written in the label (1-12 with a meridiem, 0-23 without)
        minute: Minute (0-59)
        meridiem: 'a', 'p' or None

    Raises:
        ParseError: If the fields are out of range
    """
    if minute > 59 or (meridiem and not 1 <= hour <= 12) or hour > 23:
        raise ParseError(f"Invalid clock time {hour}:{minute:02d}")
    if meridiem:
        hour = hour % 12
        if meridiem == 'p':
            hour += 12
    return timedelta(hours=hour, minutes=minute)


def parse_interval_label(label):
    """Parse a bracket label into its start and end times.

    Everything other than the two clock times ("to", "a.m.", "p.m.") is
    treated as noise. A start time written without a meridiem takes the end
    time's.

    Args:
        label: Label like '11:30 a.m. to 12:29 p.m.'

    Returns:
        Tuple of (start, end) as timedeltas since midnight

    Raises:
        ParseError: If the label does not hold exactly two clock times
    """
    matches = CLOCK_TIME.findall(str(label))
    if len(matches) != 2:
        raise ParseError(f"Interval label {label!r} does not contain two clock times")

    (start_h, start_m, start_mer), (end_h, end_m, end_mer) = matches
    end_mer = end_mer.lower() or None
    start_mer = start_mer.lower() or end_mer
    try:
        start = to_clock_time(int(start_h), int(start_m), start_mer)
        end = to_clock_time(int(end_h), int(end_m), end_mer)
    except ParseError as e:
        raise ParseError(f"Interval label {label!r}: {e}") from None
    return start, end


def interval_length(start, end):
    """Minutes from start to end; a bracket that crosses midnight wraps."""
    delta = end - start
    if delta < timedelta(0):
        delta += ONE_DAY
    return delta.total_seconds() / 60


def build_interval_reference(code_table, variable='JWAP'):
    """Build the code -> minutes-after-midnight reference for a time variable.

    Code 0 (not applicable) is left out. Walking the remaining codes in
    ascending order, the first bracket starts at offset 0 and every later one
    starts at previous start + previous length + 1. The stored value is the
    bracket's start offset plus half its length.

    Args:
        code_table: Dict of code string -> bracket label
        variable: Variable name, for error messages

    Returns:
        Dict of integer code -> midpoint offset in minutes (float)

    Raises:
        ParseError: If any label is not a bracket of two clock times
    """
    entries = sorted(
        ((code_to_int(code, variable), label) for code, label in code_table.items()),
        key=lambda entry: entry[0]
    )

    reference = {}
    start_offset = 0.0
    for code, label in entries:
        if code == 0:
            continue
        start, end = parse_interval_label(label)
        length = interval_length(start, end)
        reference[code] = start_offset + length / 2
        start_offset += length + 1
    return reference


def apply_interval_reference(values, reference, variable='JWAP'):
    """Replace bracket codes with their midpoint offsets.

    Args:
        values: Iterable of numeric codes (already coerced to float)
        reference: Output of build_interval_reference()
        variable: Variable name, for error messages

    Returns:
        List of floats; 0 stays 0

    Raises:
        DomainError: If a non-zero code has no bracket
    """
    converted = []
    for value in values:
        if value == 0:
            converted.append(0.0)
            continue
        code = int(value) if float(value).is_integer() else None
        if code not in reference:
            raise DomainError(variable, value, f"{variable}: no time bracket for code {value!r}")
        converted.append(reference[code])
    return converted
