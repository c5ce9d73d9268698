"""Legal query values for the ACS 1-year PUMS API."""

# 2020 ACS 1-year microdata were never released (experimental estimates only)
YEARS = tuple(year for year in range(2010, 2023) if year != 2020)

NUMERIC_VARS = ('AGEP', 'GASP', 'GRPIP', 'JWAP', 'JWDP', 'JWMNP')
CATEGORICAL_VARS = ('FER', 'HHL', 'HISPEED', 'JWTRNS', 'SCH', 'SCHL', 'SEX')
LOCATION_TYPES = ('ALL', 'REGION', 'DIVISION', 'STATE')

# Numeric variables whose codes are time-of-day brackets
TIME_VARS = ('JWAP', 'JWDP')

# Categorical variables whose code table has no code 0
ONE_BASED_VARS = ('SEX',)

WEIGHT_VAR = 'PWGTP'
YEAR_COLUMN = 'YEAR'


def variable_kind(name):
    """Return 'numeric', 'categorical' or None for a variable name."""
    if name in NUMERIC_VARS:
        return 'numeric'
    if name in CATEGORICAL_VARS:
        return 'categorical'
    return None


def describe_years():
    """Human-readable legal year range, used in validation messages."""
    return f"{YEARS[0]}-{YEARS[-1]} excluding 2020"
