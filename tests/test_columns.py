import pytest

from cdr_filter.config import Field, get_profile
from cdr_filter.errors import MissingColumnError
from cdr_filter.transforms.columns import is_party_header, resolve_columns


def test_jio_header_resolution(jio_text):
    header = jio_text.splitlines()[2].split(",")
    mapping = resolve_columns(header, get_profile("jio"))

    assert mapping.first_cell == 6
    assert mapping.last_cell == 7
    assert mapping.calling == 2
    assert mapping.called == 3
    assert mapping.index_of(Field.DATE) == 0
    assert mapping.index_of(Field.TIME) == 1
    assert mapping.index_of(Field.DURATION) == 5
    assert mapping.index_of(Field.ROAMING) == 10
    assert mapping.index_of(Field.LRN) == 11
    assert mapping.unmapped == []
    assert mapping.width == len(header)


def test_equal_rank_aliases_keep_leftmost_column():
    header = ["Call Date", "Date", "First CGI", "Last CGI"]
    mapping = resolve_columns(header, get_profile("jio"))
    assert mapping.index_of(Field.DATE) == 0


def test_alias_beats_canonical_name_even_when_right_of_it():
    profile = get_profile("jio").with_overrides(header_aliases={"handset make": "IMEI Manufacturer"})
    header = ["IMEI Manufacturer", "First CGI", "Last CGI", "Handset Make"]
    mapping = resolve_columns(header, profile)
    assert mapping.index_of(Field.IMEI_MANUFACTURER) == 3


def test_party_candidates_ordered_by_rule_then_position():
    header = ["B Party", "B Party Mobile Number", "First CGI", "B Party No", "Last CGI"]
    mapping = resolve_columns(header, get_profile("jio"))
    # alias (3) < heuristic (1) < canonical name (0)
    assert mapping.party_candidates == [3, 1, 0]
    assert mapping.index_of(Field.B_PARTY) is None


def test_cell_columns_are_not_remapped_by_aliases():
    profile = get_profile("jio").with_overrides(header_aliases={"first cgi": "Date"})
    mapping = resolve_columns(["First CGI", "Last CGI", "Call Date"], profile)
    assert mapping.first_cell == 0
    assert mapping.index_of(Field.DATE) == 2


def test_unknown_headers_are_reported():
    mapping = resolve_columns(["First CGI", "Last CGI", "Weird Column", ""], get_profile("jio"))
    assert mapping.unmapped == ["Weird Column"]


@pytest.mark.parametrize(
    "header, missing",
    [
        (["Call Date", "Last CGI"], "First Cell ID"),
        (["Call Date", "First CGI"], "Last Cell ID"),
    ],
)
def test_missing_cell_column_is_fatal(header, missing):
    with pytest.raises(MissingColumnError, match=missing):
        resolve_columns(header, get_profile("jio"))


@pytest.mark.parametrize(
    "name, expected",
    [
        ("b party mobile number", True),
        ("b_party_no", True),
        ("b party phone", True),
        ("b party provider", False),
        ("b party", False),
        ("calling number", False),
    ],
)
def test_party_header_heuristic(name, expected):
    assert is_party_header(name) is expected
