"""Turn the raw PUMS string matrix into a typed, decoded table."""

import math

import pandas as pd

from . import catalog
from . import fetch
from .decode import decode_column
from .errors import ParseError, SchemaError
from .intervals import apply_interval_reference, build_interval_reference
from .table import PumsTable


# === Functional Core (Pure Functions - No I/O) ===

def parse_raw_response(payload):
    """Split a raw response into header and data rows, checking its shape.

    Args:
        payload: Decoded JSON body, expected to be a list of lists of strings

    Returns:
        Tuple of (header, rows)

    Raises:
        ParseError: If the payload is not a list of lists
        SchemaError: If the header is missing, too short, or a row has the wrong width
    """
    if not isinstance(payload, list) or not all(isinstance(row, list) for row in payload):
        raise ParseError("Response body is not a JSON array of arrays")
    if not payload:
        raise SchemaError("Response has no header row")

    header = [str(name) for name in payload[0]]
    if len(header) < 3:
        raise SchemaError(f"Expected numeric, categorical and weight columns, got {header}")

    rows = payload[1:]
    for i, row in enumerate(rows, start=1):
        if len(row) != len(header):
            raise SchemaError(f"Row {i} has {len(row)} values, header has {len(header)}")
    return header, rows


def coerce_numeric(values, column):
    """Convert a column of strings to floats.

    Raises:
        ParseError: Naming the column and the first value that is not a finite number
    """
    converted = []
    for value in values:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ParseError(f"Column {column}: value {value!r} is not numeric") from None
        if not math.isfinite(number):
            raise ParseError(f"Column {column}: value {value!r} is not a finite number")
        converted.append(number)
    return converted


def normalize_response(raw, year, fetch_code_table=None):
    """Build a PumsTable from a raw response.

    Roles come from position, not name: column 1 is numeric, column 2 is
    categorical, column 3 is the weight, and the rest are geography.

    Args:
        raw: Decoded JSON body of a PUMS query
        year: Survey year, used to fetch the matching code tables
        fetch_code_table: Callable (year, variable) -> code table
            (default: fetch.fetch_code_table)

    Returns:
        PumsTable with float numeric/weight columns and labelled categories

    Raises:
        ParseError, SchemaError, DomainError: Nothing partial is returned
    """
    if fetch_code_table is None:
        fetch_code_table = fetch.fetch_code_table

    header, rows = parse_raw_response(raw)
    data = pd.DataFrame(rows, columns=header, dtype=object)
    numeric, categorical, weight = header[:3]

    data[numeric] = pd.Series(coerce_numeric(data[numeric], numeric), index=data.index, dtype=float)
    data[weight] = pd.Series(coerce_numeric(data[weight], weight), index=data.index, dtype=float)

    for variable in catalog.TIME_VARS:
        if variable in header:
            reference = build_interval_reference(fetch_code_table(year, variable), variable)
            values = coerce_numeric(data[variable], variable)
            converted = apply_interval_reference(values, reference, variable)
            data[variable] = pd.Series(converted, index=data.index, dtype=float)

    if categorical not in catalog.CATEGORICAL_VARS:
        raise SchemaError(
            f"Column 2 is {categorical!r}, not a categorical variable "
            f"({', '.join(catalog.CATEGORICAL_VARS)})"
        )
    code_table = fetch_code_table(year, categorical)
    labels = decode_column(data[categorical], code_table, categorical)
    data[categorical] = pd.Series(labels, index=data.index, dtype=object)

    return PumsTable.from_frame(data)
