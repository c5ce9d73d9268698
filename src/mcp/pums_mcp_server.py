from fastmcp import FastMCP
from src.pums.pipeline import get_pums

mcp = FastMCP("PUMS")


# Functional Core
def table_to_payload(table):
    """Flatten a PumsTable into JSON-friendly columns and rows."""
    data = table.data.astype(object).where(table.data.notna(), None)
    return {
        'columns': [str(c) for c in data.columns],
        'data': data.values.tolist()
    }


# Imperative Shell
def query(year: int = 2022, numeric_var: str = 'AGEP', categorical_var: str = 'SEX',
          location_type: str = 'ALL', location_code: str = '*') -> dict:
    """Query ACS 1-year PUMS microdata (person weight PWGTP always included)"""
    table = get_pums(year, numeric_var, categorical_var, location_type, location_code)
    return table_to_payload(table)


mcp.tool(query)

if __name__ == "__main__":
    mcp.run(transport="http", host="0.0.0.0", port=8001)
