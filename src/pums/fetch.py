"""Fetch PUMS data and variable metadata from the Census API."""

import requests

from .errors import ParseError, SchemaError
from .query import build_variable_url


REQUEST_TIMEOUT = 60
USER_AGENT = 'Mozilla/5.0'


# === Functional Core (Pure Functions - No I/O) ===

def extract_code_table(metadata, variable):
    """Pull the code -> label mapping out of a variable metadata document.

    Args:
        metadata: Parsed JSON from .../pums/variables/<VAR>.json
        variable: Variable name, for error messages

    Returns:
        Dict of code string -> label string, in the order the service sent them

    Raises:
        SchemaError: If the document has no values.item mapping
    """
    values = metadata.get('values') if isinstance(metadata, dict) else None
    items = values.get('item') if isinstance(values, dict) else None
    if not isinstance(items, dict) or not items:
        raise SchemaError(f"Metadata for {variable} has no values.item code table")
    return {str(code): str(label) for code, label in items.items()}


# === I/O Layer ===

def fetch_json(url):
    """GET a URL and decode its JSON body.

    Raises:
        requests.HTTPError: On a non-success status
        ParseError: If the body is not JSON
    """
    headers = {'User-Agent': USER_AGENT}
    resp = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    try:
        return resp.json()
    except ValueError as e:
        raise ParseError(f"Response from {url} is not valid JSON: {e}") from e


def fetch_code_table(year, variable):
    """Download the code table for one variable and survey year."""
    metadata = fetch_json(build_variable_url(year, variable))
    return extract_code_table(metadata, variable)
