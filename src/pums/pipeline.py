#!/usr/bin/env python3
"""Query ACS 1-year PUMS data for one or more survey years."""

import os

import pandas as pd

from . import catalog
from . import fetch
from .errors import SchemaError, ValidationError
from .normalize import normalize_response, parse_raw_response
from .query import QuerySpec, build_query_url, validate_query
from .table import PumsTable


# === Functional Core (Pure Functions - No I/O) ===

def check_requested_columns(header, spec):
    """Check that the response columns line up with the requested variables.

    Raises:
        SchemaError: If column 1 or 2 is not the requested variable
    """
    expected = [spec.numeric_var, spec.categorical_var, catalog.WEIGHT_VAR]
    if header[:3] != expected:
        raise SchemaError(f"Expected leading columns {expected}, got {header[:3]}")


def parse_years(text):
    """Parse a comma-separated year list like '2022,2021'.

    Raises:
        ValidationError: If any entry is not an integer
    """
    try:
        return [int(part) for part in text.split(',') if part.strip()]
    except ValueError:
        raise ValidationError('years', text, "must be comma-separated integers") from None


def concat_tables(tables):
    """Stack per-year tables in the order given."""
    data = pd.concat([table.data for table in tables], ignore_index=True)
    return PumsTable.from_frame(data)


# === I/O Layer ===

def get_pums(year=2022, numeric_var='AGEP', categorical_var='SEX',
             location_type='ALL', location_code='*'):
    """Fetch and normalize one year of PUMS data.

    Args:
        year: Survey year (2010-2022, not 2020)
        numeric_var: One of catalog.NUMERIC_VARS
        categorical_var: One of catalog.CATEGORICAL_VARS
        location_type: 'ALL', 'REGION', 'DIVISION' or 'STATE'
        location_code: Geography code, e.g. '19' for Iowa ('*' for all)

    Returns:
        PumsTable

    Raises:
        ValidationError: Before any request, if a parameter is illegal
        requests.HTTPError: On a non-success response
        ParseError, SchemaError, DomainError: If the response cannot be normalized
    """
    spec = QuerySpec(year, numeric_var, categorical_var, location_type, location_code)
    url = build_query_url(spec)

    raw = fetch.fetch_json(url)
    header, _ = parse_raw_response(raw)
    check_requested_columns(header, spec)

    return normalize_response(raw, year, fetch_code_table=fetch.fetch_code_table)


def get_pums_multi_year(years, numeric_var='AGEP', categorical_var='SEX',
                        location_type='ALL', location_code='*'):
    """Fetch several survey years and stack them with a YEAR column.

    Every year is validated before the first request. Years are fetched one
    after another and appear in the output in the order supplied.

    Returns:
        PumsTable with a YEAR column
    """
    years = list(years)
    if not years:
        raise ValidationError('years', years, "at least one year is required")
    for year in years:
        validate_query(QuerySpec(year, numeric_var, categorical_var, location_type, location_code))

    tables = []
    for year in years:
        table = get_pums(year, numeric_var, categorical_var, location_type, location_code)
        tables.append(table.with_year(year))
    return concat_tables(tables)


def main():
    """Fetch PUMS data configured by environment variables and save to parquet."""
    # I/O: Read query from environment
    years = parse_years(os.getenv('PUMS_YEARS', '2022'))
    numeric_var = os.getenv('PUMS_NUMERIC_VAR', 'AGEP')
    categorical_var = os.getenv('PUMS_CATEGORICAL_VAR', 'SEX')
    location_type = os.getenv('PUMS_LOCATION_TYPE', 'ALL')
    location_code = os.getenv('PUMS_LOCATION_CODE', '*')
    output = os.getenv('PUMS_OUTPUT', 'pums.parquet')

    print(f"Fetching {numeric_var} by {categorical_var} for {', '.join(map(str, years))} "
          f"(location: {location_type} {location_code})")

    if len(years) == 1:
        table = get_pums(years[0], numeric_var, categorical_var, location_type, location_code)
    else:
        table = get_pums_multi_year(years, numeric_var, categorical_var, location_type, location_code)
    print(f"Fetched {len(table)} records")

    # I/O: Save before summarizing
    table.data.to_parquet(output, index=False)
    print(f"✓ Saved to {output}")

    # Core: Weighted summary
    summary = table.summarize()
    stats = summary['numeric']
    print(f"\n{stats['variable']}: weighted mean {stats['mean']:.2f}, sd {stats['sd']:.2f}")
    print(summary['categorical'].to_string(index=False))


if __name__ == '__main__':
    main()
