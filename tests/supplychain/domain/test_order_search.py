from datetime import date

import pytest
from supplychain.order.order import OrderStatus
from supplychain.projections.order_search import OrderRow, OrderSearch, SortKey, matches, search


def _row(order_id, **overrides):
    values = dict(
        order_id=order_id,
        order_number=f"AO-20260310-{order_id.upper()}",
        agency_id="agency-1",
        agency_name="Harbor Street Agency",
        status="PendingApproval",
        product_summary="Rice 10kg (+1)",
        total_quantity=5,
        total_amount=3750,
        ordered_on=date(2026, 3, 10),
        arrival_date=date(2026, 3, 14),
    )
    values.update(overrides)
    return OrderRow(**values)


@pytest.fixture()
def rows():
    return [
        _row("c", total_amount=500, driver_name="Lee", status="InTransit"),
        _row("a", total_amount=900, ordered_on=date(2026, 3, 8)),
        _row("b", total_amount=500, driver_name="kim", status="Delivered", agency_name="Hillside Agency"),
        _row("d", total_amount=1200, ordered_on=date(2026, 3, 12), product_summary="Canola Oil 1L"),
    ]


def _ids(result):
    return [row.order_id for row in result]


class TestSorting:
    def test_default_is_newest_first(self, rows):
        assert _ids(search(rows, OrderSearch())) == ["d", "b", "c", "a"]

    def test_ties_fall_back_to_ascending_order_id(self, rows):
        query = OrderSearch(sort_by=SortKey.TOTAL_AMOUNT, direction="asc")
        assert _ids(search(rows, query)) == ["b", "c", "a", "d"]

    def test_ties_keep_ascending_order_id_when_descending(self, rows):
        query = OrderSearch(sort_by=SortKey.TOTAL_AMOUNT, direction="desc")
        assert _ids(search(rows, query)) == ["d", "a", "b", "c"]

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_missing_values_sort_last(self, rows, direction):
        result = _ids(search(rows, OrderSearch(sort_by=SortKey.DRIVER_NAME, direction=direction)))
        assert result[2:] == ["a", "d"]

    def test_text_sorting_ignores_case(self, rows):
        query = OrderSearch(sort_by=SortKey.DRIVER_NAME, direction="asc")
        assert _ids(search(rows, query))[:2] == ["b", "c"]

    def test_result_is_independent_of_input_order(self, rows):
        query = OrderSearch(sort_by=SortKey.STATUS)
        assert _ids(search(rows, query)) == _ids(search(list(reversed(rows)), query))


class TestFilters:
    def test_status_filter(self, rows):
        query = OrderSearch(statuses=[OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED])
        assert sorted(_ids(search(rows, query))) == ["b", "c"]

    def test_status_filter_accepts_wire_values(self, rows):
        query = OrderSearch(statuses=["Delivered"])
        assert _ids(search(rows, query)) == ["b"]

    def test_date_range_is_inclusive(self, rows):
        query = OrderSearch(ordered_from=date(2026, 3, 10), ordered_to=date(2026, 3, 10))
        assert sorted(_ids(search(rows, query))) == ["b", "c"]

    def test_amount_range(self, rows):
        query = OrderSearch(amount_min=600, amount_max=1200)
        assert sorted(_ids(search(rows, query))) == ["a", "d"]

    def test_text_filters_are_case_insensitive_substrings(self, rows):
        assert _ids(search(rows, OrderSearch(product="canola"))) == ["d"]
        assert _ids(search(rows, OrderSearch(agency="HILLSIDE"))) == ["b"]
        assert _ids(search(rows, OrderSearch(driver="le"))) == ["c"]

    def test_blank_text_filter_matches_everything(self, rows):
        assert all(matches(row, OrderSearch(product="")) for row in rows)

    def test_filters_combine(self, rows):
        query = OrderSearch(amount_max=500, driver="kim")
        assert _ids(search(rows, query)) == ["b"]
