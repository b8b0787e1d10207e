"""test_query.py — filter, sort and service behavior for transaction queries."""

import pytest

from ynab_analyst.m01_transactions.models import Transaction
from ynab_analyst.m01_transactions.query import SortBy, TransactionQuery
from ynab_analyst.m01_transactions.service import TransactionService
from ynab_analyst.m02_analytics.aggregations import category_spend_total


def _t(tid, amount, category_id="misc", date=None, description=None):
    return Transaction(
        id=tid,
        account_id="acct",
        category_id=category_id,
        amount=amount,
        date=date,
        description=description,
    )


def test_category_filter_keeps_input_order_and_totals_spend():
    xs = [_t("a", -5000, "groceries"), _t("b", -3000, "groceries"), _t("c", -4000, "gas")]
    query = TransactionQuery().with_categories(["groceries"])

    result = query.apply(xs)

    assert [t.amount for t in result] == [-5000, -3000]
    assert category_spend_total(xs, query) == 8000


def test_amount_range_is_inclusive_and_anded():
    xs = [_t("a", -5000), _t("b", -15000), _t("c", 100000)]
    result = TransactionQuery().with_amount_range(-10000, -1000).apply(xs)
    assert [t.amount for t in result] == [-5000]

    bounds = [_t("lo", -10000), _t("hi", -1000)]
    assert len(TransactionQuery().with_amount_range(-10000, -1000).apply(bounds)) == 2


def test_empty_query_is_identity_over_same_objects():
    xs = [_t("a", 3), _t("b", -1), _t("c", 2)]
    result = TransactionQuery().apply(xs)
    assert result == xs
    assert all(r is x for r, x in zip(result, xs))


def test_empty_category_allow_list_matches_everything():
    xs = [_t("a", -1, "x"), _t("b", -2, "y")]
    assert TransactionQuery().with_categories([]).apply(xs) == xs


@pytest.mark.parametrize("descending", [False, True])
def test_amount_sort_is_stable(descending):
    xs = [_t("first", -100), _t("big", 500), _t("second", -100), _t("third", -100)]
    query = TransactionQuery()
    query = query.sort_by_amount_descending() if descending else query.sort_by_amount_ascending()

    ids = [t.id for t in query.apply(xs) if t.amount == -100]

    assert ids == ["first", "second", "third"]


def test_amount_sort_orders_values():
    xs = [_t("a", 10), _t("b", -30), _t("c", 20)]
    assert [t.amount for t in TransactionQuery().sort_by_amount_ascending().apply(xs)] == [-30, 10, 20]
    assert [t.amount for t in TransactionQuery().sort_by_amount_descending().apply(xs)] == [20, 10, -30]


def test_date_sort_places_dated_before_dateless():
    xs = [
        _t("none-1", 1),
        _t("mar", 1, date="2024-03-01"),
        _t("none-2", 1),
        _t("jan", 1, date="2024-01-15"),
    ]
    result = TransactionQuery().sort_by_date().apply(xs)
    assert [t.id for t in result] == ["jan", "mar", "none-1", "none-2"]


def test_text_search_is_case_insensitive_and_skips_descriptionless():
    xs = [
        _t("a", -1, description="Corner MARKET"),
        _t("b", -1, description=None),
        _t("c", -1, description="Fuel"),
    ]
    result = TransactionQuery().with_text_search("market").apply(xs)
    assert [t.id for t in result] == ["a"]


def test_date_range_is_inclusive_and_skips_dateless():
    xs = [
        _t("before", -1, date="2023-12-31"),
        _t("start", -1, date="2024-01-01"),
        _t("end", -1, date="2024-01-31"),
        _t("after", -1, date="2024-02-01"),
        _t("undated", -1),
    ]
    result = TransactionQuery().with_date_range("2024-01-01", "2024-01-31").apply(xs)
    assert [t.id for t in result] == ["start", "end"]


def test_open_date_range_is_no_filter():
    query = TransactionQuery().with_date_range(None, None)
    assert query.date_range is None
    assert query.apply([_t("undated", -1)])


def test_builders_return_new_queries():
    base = TransactionQuery()
    narrowed = base.with_min_amount(-10).with_category("gas").with_sort(SortBy.DATE)

    assert base == TransactionQuery()
    assert narrowed.min_amount == -10
    assert narrowed.categories == ("gas",)
    assert narrowed.sort_by is SortBy.DATE


def test_filter_is_an_alias_for_apply():
    xs = [_t("a", -1), _t("b", 5)]
    query = TransactionQuery().with_max_amount(0)
    assert query.filter(xs) == query.apply(xs)


def test_transaction_service_collects_and_queries():
    service = TransactionService()
    assert service.total_count() == 0

    service.add_transaction(_t("a", -5000, "groceries"))
    service.add_transactions([_t("b", -3000, "groceries"), _t("c", -4000, "gas")])

    assert service.total_count() == 3
    result = service.query(TransactionQuery().with_category("groceries"))
    assert [t.id for t in result] == ["a", "b"]
    assert service.total_count() == 3
