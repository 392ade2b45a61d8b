from __future__ import annotations

import re

import pytest

from locations.query import (
    GeoPoint,
    InvalidSearchParameter,
    SearchCriteria,
    build_criteria,
    compose,
    parse_near,
    parse_radius,
)


class TestParseNear:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("40.7,-74.0", GeoPoint(40.7, -74.0)),
            ("40.7, -74.0", GeoPoint(40.7, -74.0)),
            ("  34.0522 ,  -118.2437 ", GeoPoint(34.0522, -118.2437)),
            ("0,0", GeoPoint(0.0, 0.0)),
            ("90,180", GeoPoint(90.0, 180.0)),
            ("-90,-180", GeoPoint(-90.0, -180.0)),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_near(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "40.7", "40.7,-74.0,3", "north,-74.0", "40.7,", ",-74.0", "nan,1", "1,inf", "95,0", "-90.5,0", "0,200", "0,-180.01", "95,200"],
    )
    def test_malformed_or_missing_is_none(self, raw):
        assert parse_near(raw) is None


class TestParseRadius:
    def test_parses_number(self):
        assert parse_radius("25.5", 10.0) == 25.5

    @pytest.mark.parametrize("raw", [None, "", "far", "nan", "-inf"])
    def test_falls_back_to_default(self, raw):
        assert parse_radius(raw, 10.0) == 10.0

    def test_non_positive_values_are_kept(self):
        assert parse_radius("0", 10.0) == 0.0
        assert parse_radius("-5", 10.0) == -5.0


class TestBuildCriteria:
    def test_no_params(self):
        assert build_criteria() == SearchCriteria(search="", city="", near=None, radius_miles=10.0)

    def test_trims_text(self):
        criteria = build_criteria(search="  Popo ", city=" Springfield ")
        assert criteria.search == "Popo"
        assert criteria.city == "Springfield"

    def test_radius_defaults_when_near_present(self):
        criteria = build_criteria(near="40.7,-74.0")
        assert criteria.near == GeoPoint(40.7, -74.0)
        assert criteria.radius_miles == 10.0
        assert criteria.is_proximity

    def test_unparsable_radius_uses_default(self):
        criteria = build_criteria(near="40.7,-74.0", radius="lots", default_radius=3.0)
        assert criteria.radius_miles == 3.0

    def test_explicit_radius(self):
        assert build_criteria(near="40.7,-74.0", radius="50").radius_miles == 50.0

    def test_malformed_near_rejected_when_strict(self):
        with pytest.raises(InvalidSearchParameter):
            build_criteria(near="40.7", strict_near=True)

    def test_off_globe_near_rejected_when_strict(self):
        with pytest.raises(InvalidSearchParameter):
            build_criteria(near="95,200", strict_near=True)

    def test_off_globe_near_disables_proximity_when_lenient(self):
        assert build_criteria(near="95,200", strict_near=False).near is None

    def test_malformed_near_disables_proximity_when_lenient(self):
        criteria = build_criteria(search="cafe", near="40.7;-74.0", radius="5", strict_near=False)
        assert criteria.near is None
        assert not criteria.is_proximity
        assert criteria.search == "cafe"

    def test_blank_near_is_not_an_error(self):
        assert build_criteria(near="   ", strict_near=True).near is None


class TestCompose:
    def test_no_criteria_has_no_where_clause(self):
        predicate = compose(SearchCriteria())
        assert predicate.where_sql() == ""
        assert predicate.args == ()
        assert predicate.order_by == "id ASC"

    def test_search_matches_name_or_address(self):
        predicate = compose(SearchCriteria(search="Popo"))
        assert predicate.where_sql() == "WHERE (name ILIKE $1 OR address ILIKE $1)"
        assert predicate.args == ("%Popo%",)

    def test_city_matches_address(self):
        predicate = compose(SearchCriteria(city="Denver"))
        assert predicate.where_sql() == "WHERE address ILIKE $1"
        assert predicate.args == ("%Denver%",)

    def test_search_and_city_are_combined_with_and(self):
        predicate = compose(SearchCriteria(search="cafe", city="Denver"))
        assert predicate.where_sql() == "WHERE (name ILIKE $1 OR address ILIKE $1) AND address ILIKE $2"
        assert predicate.args == ("%cafe%", "%Denver%")

    def test_proximity_is_not_part_of_predicate(self):
        with_near = compose(SearchCriteria(search="cafe", near=GeoPoint(1.0, 2.0), radius_miles=5.0))
        without = compose(SearchCriteria(search="cafe"))
        assert with_near == without

    def test_like_metacharacters_are_literal(self):
        predicate = compose(SearchCriteria(search="50%_off\\"))
        assert predicate.args == ("%50\\%\\_off\\\\%",)


def _ilike(value: str, pattern: str) -> bool:
    """
    PostgreSQL ILIKE with the default backslash escape.
    """
    regex = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            regex.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            regex.append(".*")
        elif ch == "_":
            regex.append(".")
        else:
            regex.append(re.escape(ch))
    return re.fullmatch("".join(regex), value, flags=re.IGNORECASE | re.DOTALL) is not None


def _matches(criteria: SearchCriteria, name: str, address: str) -> bool:
    predicate = compose(criteria)
    args = iter(predicate.args)
    if criteria.search:
        pattern = next(args)
        if not (_ilike(name, pattern) or _ilike(address, pattern)):
            return False
    if criteria.city:
        if not _ilike(address, next(args)):
            return False
    return True


class TestSubstringSemantics:
    RECORDS = [
        ("Popo Downtown", "123 Main St, Springfield"),
        ("Popito Suburbs", "234 Bitty St, Shelbyville"),
    ]

    def _names(self, criteria: SearchCriteria) -> list[str]:
        return [name for name, address in self.RECORDS if _matches(criteria, name, address)]

    def test_popo_matches_only_downtown(self):
        assert self._names(SearchCriteria(search="Popo")) == ["Popo Downtown"]

    def test_match_is_case_insensitive(self):
        assert self._names(SearchCriteria(search="pOpO")) == ["Popo Downtown"]

    def test_shared_prefix_matches_both(self):
        assert self._names(SearchCriteria(search="Pop")) == ["Popo Downtown", "Popito Suburbs"]

    def test_search_matches_address_too(self):
        assert self._names(SearchCriteria(search="bitty")) == ["Popito Suburbs"]

    def test_city_is_anded_with_search(self):
        assert self._names(SearchCriteria(search="pop", city="shelby")) == ["Popito Suburbs"]
        assert self._names(SearchCriteria(search="popo", city="shelby")) == []

    def test_wildcard_characters_are_literal(self):
        assert self._names(SearchCriteria(search="P_po")) == []
        assert self._names(SearchCriteria(search="Po%Down")) == []
        assert _matches(SearchCriteria(search="50%_off"), "50%_off deals", "x")
