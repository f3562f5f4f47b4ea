"""Tests for running compiled property queries against the store."""

import math

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StorageError
from app.core.geo import distance_meters
from app.models.property import Property
from app.services import query_executor
from app.services.filter_compiler import SortSpec, compile_query

# name, city, longitude, latitude
BAY_AREA = [
    ("Los Angeles Loft", "Los Angeles", -118.2437, 34.0522),
    ("Palo Alto House", "Palo Alto", -122.1430, 37.4419),
    ("Downtown Flat", "San Francisco", -122.42, 37.77),
    ("San Jose Condo", "San Jose", -121.8863, 37.3382),
    ("Oakland Bungalow", "Oakland", -122.2711, 37.8044),
]


def run(db, **params):
    return query_executor.execute(db, compile_query(params))


def names(page) -> list:
    return [item.name for item in page.items]


class TestPagination:
    @pytest.fixture
    def twenty_five(self, make_property):
        return [make_property(name=f"Property {i:02d}") for i in range(25)]

    @pytest.mark.parametrize("page_number", [1, 2, 3, 4, 10])
    def test_item_count_per_page(self, db, twenty_five, page_number) -> None:
        page = run(db, page=str(page_number), pageSize="10")
        expected = min(10, max(0, 25 - (page_number - 1) * 10))
        assert len(page.items) == expected
        assert page.total_count == 25
        assert page.total_pages == 3
        assert page.current_page == page_number

    def test_total_pages_is_ceiling(self, db, twenty_five) -> None:
        for size in (1, 4, 5, 7, 25, 100):
            page = run(db, pageSize=str(size))
            assert page.total_pages == math.ceil(25 / size)

    def test_page_beyond_last_is_empty(self, db, twenty_five) -> None:
        page = run(db, page="4", pageSize="10")
        assert page.items == []
        assert page.total_count == 25

    def test_no_matches(self, db, make_property) -> None:
        make_property(name="Only One")
        page = run(db, name="nothing like this")
        assert page.items == []
        assert page.total_count == 0
        assert page.total_pages == 0

    def test_pages_partition_the_result_set(self, db, make_property) -> None:
        # Same income everywhere: only the tie-breakers decide the order
        for i in range(11):
            make_property(name=f"Same {i:02d}", monthly_income=7000.0)

        seen = []
        for p in range(1, 5):
            seen.extend(names(run(db, page=str(p), pageSize="3", sort="monthlyIncome_desc")))

        assert len(seen) == 11
        assert len(set(seen)) == 11
        # Equal sort keys fall back to creation order
        assert seen == [f"Same {i:02d}" for i in range(11)]


class TestFilters:
    def test_income_range_is_closed(self, db, make_property) -> None:
        for income in (4999, 5000, 7500, 10000, 10001):
            make_property(name=f"Income {income}", monthly_income=float(income))

        page = run(db, minIncome="5000", maxIncome="10000", sort="monthlyIncome_asc")
        incomes = [item.owner_details.monthly_income for item in page.items]
        assert incomes == [5000, 7500, 10000]

    def test_single_income_bound(self, db, make_property) -> None:
        for income in (1000, 20000, 30000):
            make_property(monthly_income=float(income))
        assert run(db, minIncome="20000").total_count == 2
        assert run(db, maxIncome="1000").total_count == 1

    def test_malformed_income_ignored(self, db, make_property) -> None:
        make_property(monthly_income=100.0)
        make_property(monthly_income=100000.0)
        assert run(db, minIncome="lots", maxIncome="NaN").total_count == 2

    def test_text_filters_are_case_insensitive_substrings(self, db, make_property) -> None:
        make_property(name="Sunset Villa", city="San Francisco", state="CA")
        make_property(name="Harbor View", city="Oakland", state="CA")
        make_property(name="Lakeside Villa", city="Austin", state="TX")

        assert names(run(db, name="VILLA", sort="name_asc")) == ["Lakeside Villa", "Sunset Villa"]
        assert names(run(db, city="francisco")) == ["Sunset Villa"]
        assert run(db, state="ca").total_count == 2

    def test_filters_combine(self, db, make_property) -> None:
        make_property(name="Sunset Villa", city="San Francisco", monthly_income=15000.0)
        make_property(name="Sunset Villa II", city="San Francisco", monthly_income=3000.0)
        make_property(name="Sunset Villa III", city="Oakland", monthly_income=15000.0)

        page = run(db, name="sunset", city="san", minIncome="10000")
        assert names(page) == ["Sunset Villa"]

    def test_wildcards_match_literally(self, db, make_property) -> None:
        make_property(name="100% Solar Home")
        make_property(name="1000 Oaks")
        make_property(name="Under_score Place")
        make_property(name="Underscore Place")

        assert names(run(db, name="100%")) == ["100% Solar Home"]
        assert names(run(db, name="under_")) == ["Under_score Place"]


class TestSorting:
    def test_default_is_newest_first(self, db, make_property) -> None:
        for label in ("first", "second", "third"):
            make_property(name=label)
        assert names(run(db)) == ["third", "second", "first"]

    def test_explicit_sort(self, db, make_property) -> None:
        make_property(name="B", total_wealth=3.0)
        make_property(name="A", total_wealth=1.0)
        make_property(name="C", total_wealth=2.0)

        assert names(run(db, sort="name_asc")) == ["A", "B", "C"]
        assert names(run(db, sort="totalWealth_desc")) == ["B", "C", "A"]
        assert names(run(db, sort="createdAt_asc")) == ["B", "A", "C"]

    def test_unknown_sort_uses_default(self, db, make_property) -> None:
        make_property(name="old")
        make_property(name="new")
        assert names(run(db, sort="secret_asc")) == ["new", "old"]


class TestNear:
    @pytest.fixture
    def bay_area(self, make_property):
        return [
            make_property(name=name, city=city, longitude=lng, latitude=lat)
            for name, city, lng, lat in BAY_AREA
        ]

    def test_radius_and_nearest_first(self, db, bay_area) -> None:
        page = run(db, near="-122.42,37.77,50000")

        assert names(page) == ["Downtown Flat", "Oakland Bungalow", "Palo Alto House"]
        assert page.total_count == 3
        distances = [item.distance_meters for item in page.items]
        assert distances == sorted(distances)
        assert distances[0] == pytest.approx(0, abs=0.01)
        assert 13000 < distances[1] < 14500
        assert 43000 < distances[2] < 45000

    def test_distance_ordering_wins_over_explicit_sort(self, db, bay_area) -> None:
        page = run(db, near="-122.42,37.77,50000", sort="name_asc")
        assert names(page) == ["Downtown Flat", "Oakland Bungalow", "Palo Alto House"]

    def test_explicit_sort_breaks_distance_ties(self, db, make_property) -> None:
        make_property(name="Twin B", longitude=-122.40, latitude=37.78)
        make_property(name="Twin A", longitude=-122.40, latitude=37.78)
        make_property(name="Far", longitude=-122.30, latitude=37.80)

        page = run(db, near="-122.42,37.77,50000", sort="name_asc")
        assert names(page) == ["Twin A", "Twin B", "Far"]

    def test_default_sort_is_not_applied_among_distance_ties(self, db, make_property) -> None:
        make_property(name="Older Twin", longitude=-122.40, latitude=37.78)
        make_property(name="Newer Twin", longitude=-122.40, latitude=37.78)

        page = run(db, near="-122.42,37.77,50000")

        # Without an explicit sort, creation order breaks the tie (not newest first)
        assert names(page) == ["Older Twin", "Newer Twin"]

    def test_near_combines_with_other_filters(self, db, make_property) -> None:
        make_property(name="Rich", monthly_income=50000.0)
        make_property(name="Modest", monthly_income=2000.0)
        make_property(name="Rich Faraway", monthly_income=50000.0, longitude=-118.24, latitude=34.05)

        page = run(db, near="-122.42,37.77,10000", minIncome="20000")
        assert names(page) == ["Rich"]

    def test_near_paginates(self, db, bay_area) -> None:
        first = run(db, near="-122.42,37.77,50000", pageSize="2")
        second = run(db, near="-122.42,37.77,50000", pageSize="2", page="2")
        assert first.total_pages == 2
        assert names(first) + names(second) == ["Downtown Flat", "Oakland Bungalow", "Palo Alto House"]

    def test_malformed_near_is_ignored(self, db, bay_area) -> None:
        page = run(db, near="-122.42,thirty-seven,50000")
        assert page.total_count == len(BAY_AREA)
        assert all(item.distance_meters is None for item in page.items)

    def test_near_without_matches(self, db, bay_area) -> None:
        page = run(db, near="2.35,48.85,10000")
        assert page.total_count == 0
        assert page.items == []


def test_storage_failure_is_wrapped(db, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "scalar", broken)
    with pytest.raises(StorageError):
        run(db)


class TestOrdering:
    @staticmethod
    def render(ordering) -> str:
        return ", ".join(str(clause.compile(dialect=postgresql.dialect())) for clause in ordering)

    def test_default_sort_is_dropped_under_distance(self) -> None:
        distance = distance_meters(Property.location, -122.42, 37.77, "postgresql")
        sql = self.render(query_executor.build_ordering(SortSpec("createdAt", True, False), distance))

        assert "created_at DESC" not in sql
        assert sql.index("ST_Distance") < sql.index("properties.created_at ASC") < sql.index("properties.id ASC")

    def test_explicit_sort_follows_distance(self) -> None:
        distance = distance_meters(Property.location, -122.42, 37.77, "postgresql")
        sql = self.render(query_executor.build_ordering(SortSpec("createdAt", True, True), distance))

        assert sql.index("ST_Distance") < sql.index("properties.created_at DESC")
        assert "created_at ASC" not in sql

    def test_default_sort_without_distance(self) -> None:
        sql = self.render(query_executor.build_ordering(SortSpec("createdAt", True, False)))
        assert sql == "properties.created_at DESC, properties.id ASC"
