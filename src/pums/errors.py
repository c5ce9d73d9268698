"""Error taxonomy for the PUMS pipeline.

Every error is fatal to the call that raised it: nothing is retried and no
partial table is returned.
"""


class PumsError(ValueError):
    """Base class for all pipeline failures."""


class ValidationError(PumsError):
    """A query parameter is outside its legal set."""

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ParseError(PumsError):
    """A response body, numeric value or interval label could not be parsed."""


class SchemaError(PumsError):
    """A column or metadata field is missing or has the wrong shape."""


class DomainError(PumsError):
    """A code falls outside its variable's legal domain."""

    def __init__(self, variable, code, message=None):
        self.variable = variable
        self.code = code
        super().__init__(message or f"Code {code!r} is not defined for {variable}")
