"""Validate PUMS query parameters and build request URLs."""

from dataclasses import dataclass

from . import catalog
from .errors import ValidationError


API_BASE = "https://api.census.gov/data"


@dataclass(frozen=True)
class QuerySpec:
    """One single-year PUMS request."""

    year: int = 2022
    numeric_var: str = 'AGEP'
    categorical_var: str = 'SEX'
    location_type: str = 'ALL'
    location_code: str = '*'


# === Functional Core (Pure Functions - No I/O) ===

def validate_query(spec):
    """Check every field of a QuerySpec against the variable catalog.

    Fields are checked in order: year, numeric_var, categorical_var,
    location_type. The first failure is raised.

    Args:
        spec: QuerySpec to check

    Raises:
        ValidationError: With the legal set for the offending field
    """
    year = spec.year
    if isinstance(year, bool) or not isinstance(year, int) or year not in catalog.YEARS:
        raise ValidationError('year', year, f"must be an integer in {catalog.describe_years()}")

    if spec.numeric_var not in catalog.NUMERIC_VARS:
        raise ValidationError(
            'numeric_var', spec.numeric_var,
            f"must be one of {', '.join(catalog.NUMERIC_VARS)}"
        )

    if spec.categorical_var not in catalog.CATEGORICAL_VARS:
        raise ValidationError(
            'categorical_var', spec.categorical_var,
            f"must be one of {', '.join(catalog.CATEGORICAL_VARS)}"
        )

    if spec.location_type not in catalog.LOCATION_TYPES:
        raise ValidationError(
            'location_type', spec.location_type,
            f"must be one of {', '.join(catalog.LOCATION_TYPES)}"
        )


def build_location_clause(location_type, location_code):
    """Return the '&for=' clause, or '' for a nationwide query."""
    if location_type == 'ALL':
        return ''
    return f"&for={location_type.lower()}:{location_code}"


def build_query_url(spec, base=API_BASE):
    """Build the data request URL for a validated query.

    The variable list is always numeric, categorical, then the weight.

    Args:
        spec: QuerySpec describing the request
        base: API root (default: Census data API)

    Returns:
        URL like '.../2022/acs/acs1/pums?get=AGEP,SEX,PWGTP&for=state:19'

    Raises:
        ValidationError: If any field is outside the catalog
    """
    validate_query(spec)
    variables = ','.join([spec.numeric_var, spec.categorical_var, catalog.WEIGHT_VAR])
    url = f"{base}/{spec.year}/acs/acs1/pums?get={variables}"
    return url + build_location_clause(spec.location_type, spec.location_code)


def build_variable_url(year, variable, base=API_BASE):
    """Build the metadata URL holding a variable's code table."""
    return f"{base}/{year}/acs/acs1/pums/variables/{variable}.json"
