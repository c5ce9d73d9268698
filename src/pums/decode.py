"""Decode categorical PUMS codes to their labels."""

from . import catalog
from .errors import DomainError, ParseError, SchemaError


# === Functional Core (Pure Functions - No I/O) ===

def code_to_int(code, variable):
    """Convert a service code string to an integer.

    The metadata writes "not applicable" as a run of 'b' characters
    ("b", "bb"); the data rows report the same entries as 0.

    Args:
        code: Code as sent by the service (e.g. '01', 'bb', '3')
        variable: Variable name, for error messages

    Returns:
        Integer code

    Raises:
        ParseError: If the code is neither numeric nor blank
    """
    text = str(code).strip()
    if text and set(text) == {'b'}:
        return 0
    try:
        return int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            raise ParseError(f"{variable}: code {code!r} is not an integer") from None
        if not number.is_integer():
            raise ParseError(f"{variable}: code {code!r} is not an integer")
        return int(number)


def sorted_labels(code_table, variable):
    """Return the code table's labels ordered by ascending numeric code."""
    entries = sorted(
        ((code_to_int(code, variable), label) for code, label in code_table.items()),
        key=lambda entry: entry[0]
    )
    return [label for _, label in entries]


def build_label_map(code_table, variable):
    """Map each legal code of a categorical variable to its label.

    Codes are assigned by position in the sorted label list, starting at 0 for
    every variable except the one-based ones (SEX), whose table has no code 0
    and whose codes start at 1.

    Args:
        code_table: Dict of code string -> label
        variable: Categorical variable name

    Returns:
        Dict of integer code -> label

    Raises:
        SchemaError: If the variable is not categorical or the table is empty
    """
    if variable not in catalog.CATEGORICAL_VARS:
        raise SchemaError(
            f"{variable!r} is not a categorical variable "
            f"(expected one of {', '.join(catalog.CATEGORICAL_VARS)})"
        )
    if not code_table:
        raise SchemaError(f"Code table for {variable} is empty")
    first_code = 1 if variable in catalog.ONE_BASED_VARS else 0
    return {first_code + i: label for i, label in enumerate(sorted_labels(code_table, variable))}


def decode_column(column, code_table, variable):
    """Relabel a raw categorical column.

    Args:
        column: Sequence of code strings from the data response
        code_table: Dict of code string -> label for the variable
        variable: Categorical variable name (the column's header)

    Returns:
        List of labels, same length and order as column

    Raises:
        DomainError: If any code has no label
    """
    label_map = build_label_map(code_table, variable)
    labels = []
    for value in column:
        code = code_to_int(value, variable)
        if code not in label_map:
            raise DomainError(
                variable, value,
                f"Code {value!r} is not defined for {variable} "
                f"(legal codes {min(label_map)}-{max(label_map)})"
            )
        labels.append(label_map[code])
    return labels
