"""Tests for raw response normalization."""

from unittest.mock import MagicMock, call

import pytest
from src.pums.errors import DomainError, ParseError, SchemaError
from src.pums.normalize import coerce_numeric, normalize_response, parse_raw_response


CODE_TABLES = {
    'SEX': {'1': 'Male', '2': 'Female'},
    'HHL': {
        'b': 'N/A (GQ/vacant)',
        '1': 'English only',
        '2': 'Spanish',
        '3': 'Other Indo-European languages',
        '4': 'Asian and Pacific Island languages',
        '5': 'Other language',
    },
    'JWAP': {
        '0': 'N/A (not a worker; worker who worked from home)',
        '1': '12:00 a.m. to 12:04 a.m.',
        '2': '12:05 a.m. to 12:09 a.m.',
        '3': '12:10 a.m. to 12:14 a.m.',
    },
}


def fake_fetch(year, variable):
    return CODE_TABLES[variable]


class TestParseRawResponse:
    """Test response shape checks."""

    def test_splits_header_and_rows(self):
        header, rows = parse_raw_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', '87']])
        assert header == ['AGEP', 'SEX', 'PWGTP']
        assert rows == [['34', '1', '87']]

    def test_not_a_matrix(self):
        with pytest.raises(ParseError):
            parse_raw_response({'error': 'unknown variable'})
        with pytest.raises(ParseError):
            parse_raw_response([['AGEP', 'SEX', 'PWGTP'], 'oops'])

    def test_empty_payload(self):
        with pytest.raises(SchemaError):
            parse_raw_response([])

    def test_short_header(self):
        with pytest.raises(SchemaError):
            parse_raw_response([['AGEP', 'PWGTP'], ['34', '87']])

    def test_ragged_row(self):
        with pytest.raises(SchemaError) as exc:
            parse_raw_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', '87'], ['20', '2']])
        assert 'Row 2' in str(exc.value)


class TestCoerceNumeric:
    """Test string to float conversion."""

    def test_converts(self):
        assert coerce_numeric(['34', '0', '-1'], 'AGEP') == [34.0, 0.0, -1.0]

    def test_reports_column_and_value(self):
        with pytest.raises(ParseError) as exc:
            coerce_numeric(['34', 'abc'], 'AGEP')
        assert 'AGEP' in str(exc.value)
        assert "'abc'" in str(exc.value)

    @pytest.mark.parametrize('value', ['nan', 'inf', '-inf', 'NaN'])
    def test_non_finite_values_fail(self, value):
        with pytest.raises(ParseError) as exc:
            coerce_numeric(['34', value], 'PWGTP')
        assert 'PWGTP' in str(exc.value)
        assert repr(value) in str(exc.value)

    def test_non_finite_weight_rejected_in_response(self):
        with pytest.raises(ParseError):
            normalize_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', 'nan']], 2022,
                               fetch_code_table=fake_fetch)


class TestNormalizeResponse:
    """Test the full normalization of one response."""

    def test_round_trip_single_row(self):
        raw = [['AGEP', 'SEX', 'PWGTP'], ['34', '1', '87']]

        table = normalize_response(raw, 2022, fetch_code_table=fake_fetch)

        assert table.data.iloc[0, 0] == 34.0
        assert isinstance(table.data.iloc[0, 0], float)
        assert table.data.iloc[0, 1] == 'Male'
        assert table.data.iloc[0, 2] == 87.0
        assert table.data[table.weight].dtype == float

    def test_roles_by_position(self):
        raw = [['GRPIP', 'HHL', 'PWGTP', 'state'], ['25', '2', '14', '19'], ['0', '0', '9', '19']]

        table = normalize_response(raw, 2022, fetch_code_table=fake_fetch)

        assert table.numeric == 'GRPIP'
        assert table.categorical == 'HHL'
        assert table.weight == 'PWGTP'
        assert table.geography == ('state',)
        assert table.data['HHL'].tolist() == ['Spanish', 'N/A (GQ/vacant)']
        assert table.data['state'].tolist() == ['19', '19']

    def test_time_variable_converted(self):
        raw = [['JWAP', 'SEX', 'PWGTP'], ['0', '1', '10'], ['2', '2', '12'], ['3', '1', '8']]

        table = normalize_response(raw, 2022, fetch_code_table=fake_fetch)

        assert table.data['JWAP'].tolist() == [0.0, 7.0, 12.0]

    def test_fetches_only_needed_code_tables(self):
        fetcher = MagicMock(side_effect=fake_fetch)

        normalize_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', '87']], 2019, fetch_code_table=fetcher)

        assert fetcher.call_args_list == [call(2019, 'SEX')]

    def test_time_table_fetched_for_time_variable(self):
        fetcher = MagicMock(side_effect=fake_fetch)

        normalize_response([['JWAP', 'SEX', 'PWGTP'], ['1', '1', '87']], 2021, fetch_code_table=fetcher)

        assert fetcher.call_args_list == [call(2021, 'JWAP'), call(2021, 'SEX')]

    def test_non_numeric_value_fails(self):
        with pytest.raises(ParseError):
            normalize_response([['AGEP', 'SEX', 'PWGTP'], ['old', '1', '87']], 2022,
                               fetch_code_table=fake_fetch)

    def test_non_numeric_weight_fails(self):
        with pytest.raises(ParseError):
            normalize_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', '']], 2022,
                               fetch_code_table=fake_fetch)

    def test_unknown_categorical_column_fails(self):
        with pytest.raises(SchemaError):
            normalize_response([['AGEP', 'WKHP', 'PWGTP'], ['34', '40', '87']], 2022,
                               fetch_code_table=fake_fetch)

    def test_code_outside_domain_fails(self):
        with pytest.raises(DomainError):
            normalize_response([['AGEP', 'SEX', 'PWGTP'], ['34', '0', '87']], 2022,
                               fetch_code_table=fake_fetch)

    def test_unknown_time_code_fails(self):
        with pytest.raises(DomainError):
            normalize_response([['JWAP', 'SEX', 'PWGTP'], ['250', '1', '87']], 2022,
                               fetch_code_table=fake_fetch)

    def test_header_only(self):
        table = normalize_response([['AGEP', 'SEX', 'PWGTP']], 2022, fetch_code_table=fake_fetch)

        assert len(table) == 0
        assert list(table.data.columns) == ['AGEP', 'SEX', 'PWGTP']

    def test_header_only_column_types(self):
        """Column types do not depend on the row count."""
        table = normalize_response([['AGEP', 'SEX', 'PWGTP']], 2022, fetch_code_table=fake_fetch)

        assert table.data.dtypes.astype(str).to_dict() == {
            'AGEP': 'float64', 'SEX': 'object', 'PWGTP': 'float64'
        }

    def test_decoded_column_is_object(self):
        table = normalize_response([['AGEP', 'SEX', 'PWGTP'], ['34', '1', '87']], 2022,
                                   fetch_code_table=fake_fetch)

        assert table.data['SEX'].dtype == object
