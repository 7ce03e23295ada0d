import pandas as pd
import pytest

from route_reconcile.openflights import AIRPORT_DAT_COLUMNS
from route_reconcile.tabular import MISSING_VALUE, decode, encode, partition, read_table, split_line, write_table
from tests.helpers import AIRPORTS_DAT


def test_split_line_keeps_quoted_commas_together():
    fields = split_line('1,"Field, North","Smalltown"')

    assert fields == ["1", "Field North", "Smalltown"]


def test_split_line_strips_only_outer_quotes():
    fields = split_line('"say ""hi""",x')

    assert fields == ['say ""hi""', "x"]


def test_decode_maps_fields_positionally_and_skips_blank_lines():
    frame = decode("a,b\n\n1,2\r\n3,4\n", ["first", "second"], has_header=True)

    assert list(frame.columns) == ["first", "second"]
    assert frame.to_dict(orient="records") == [
        {"first": "1", "second": "2"},
        {"first": "3", "second": "4"},
    ]


def test_decode_without_header_keeps_first_line():
    frame = decode("1,2\n3,4", ["first", "second"], has_header=False)

    assert list(frame["first"]) == ["1", "3"]


def test_decode_registry_rows():
    frame = decode(AIRPORTS_DAT, AIRPORT_DAT_COLUMNS, has_header=False)

    assert len(frame) == 4
    assert list(frame["iata"]) == ["JFK", "LAX", "\\N", ""]
    assert frame.loc[3, "name"] == "Field North"
    assert frame.loc[0, "lat"] == "40.6398"


def test_decode_rejects_column_count_mismatch():
    with pytest.raises(ValueError):
        decode("1,2,3", ["first", "second"], has_header=False)


def test_encode_writes_header_and_missing_marker():
    frame = pd.DataFrame([{"A": "x", "B": 1, "C": None}], columns=["A", "B", "C"], dtype=object)

    assert encode(frame, has_header=True) == f"A,B,C\nx,1,{MISSING_VALUE}"
    assert encode(frame, has_header=False) == f"x,1,{MISSING_VALUE}"


def test_registry_row_survives_decode_encode_up_to_quote_stripping():
    line = '3797,"John F Kennedy International Airport","New York","United States","JFK","KJFK",40.6398,-73.7789,13,-5,"A","America/New_York","airport","OurAirports"'

    frame = decode(line, AIRPORT_DAT_COLUMNS, has_header=False)

    assert encode(frame, has_header=False) == line.replace('"', "")


def test_write_and_read_table_round_trip_file(tmp_path):
    frame = pd.DataFrame([["JFK", "New York"]], columns=["IATA3", "City"], dtype=object)
    path = tmp_path / "out" / "airports.csv"

    write_table(frame, path, has_header=True)

    assert path.read_text(encoding="utf-8") == "IATA3,City\nJFK,New York"
    pd.testing.assert_frame_equal(read_table(path, ["IATA3", "City"], has_header=True), frame)


def test_partition_returns_non_matching_then_matching():
    odd, even = partition(range(1, 11), lambda value: value % 2 == 0)

    assert odd == [1, 3, 5, 7, 9]
    assert even == [2, 4, 6, 8, 10]
