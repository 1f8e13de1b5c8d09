from datetime import date

from app.services.filters import TransactionFilters, filter_transactions
from app.services.records import CategoryRef, TransactionRecord

TODAY = date(2024, 3, 15)


def make_transaction(**kwargs):
    base = dict(
        id="t",
        amount=10.0,
        type="expense",
        description="",
        date="2024-03-15",
        category_id=None,
        categories=None,
    )
    base.update(kwargs)
    return TransactionRecord(**base)


def ids(transactions):
    return [tx.id for tx in transactions]


def test_filtering_twice_gives_the_same_result():
    transactions = [
        make_transaction(id="a", description="Coffee", date="2024-03-10"),
        make_transaction(id="b", description="Salary", type="income", date="2024-03-01"),
        make_transaction(id="c", description="Coffee beans", date="2024-03-12"),
    ]
    filters = TransactionFilters(search="coffee", date_range="month", sort_by="amount")

    first = filter_transactions(transactions, filters, today=TODAY)
    second = filter_transactions(transactions, filters, today=TODAY)

    assert first == second
    assert ids(first) == ids(second)


def test_input_list_is_left_untouched():
    transactions = [
        make_transaction(id="a", date="2024-03-01"),
        make_transaction(id="b", date="2024-03-10"),
    ]
    result = filter_transactions(transactions, TransactionFilters(sort_order="desc"), today=TODAY)

    assert ids(result) == ["b", "a"]
    assert ids(transactions) == ["a", "b"]
    assert result is not transactions


def test_equal_sort_keys_keep_input_order_in_both_directions():
    transactions = [
        make_transaction(id="first", date="2024-03-10", amount=5),
        make_transaction(id="other", date="2024-03-11", amount=7),
        make_transaction(id="second", date="2024-03-10", amount=9),
    ]

    asc = filter_transactions(transactions, TransactionFilters(sort_by="date", sort_order="asc"), today=TODAY)
    desc = filter_transactions(transactions, TransactionFilters(sort_by="date", sort_order="desc"), today=TODAY)

    assert ids(asc) == ["first", "second", "other"]
    assert ids(desc) == ["other", "first", "second"]


def test_search_matches_description_or_category_name_case_insensitively():
    food = CategoryRef(name="Food", color="#10b981")
    transactions = [
        make_transaction(id="desc", description="Lunch with FOODies"),
        make_transaction(id="cat", description="Pizza", category_id="c1", categories=food),
        make_transaction(id="none", description=None),
        make_transaction(id="miss", description="Bus ticket"),
    ]

    result = filter_transactions(transactions, TransactionFilters(search="food"), today=TODAY)

    assert sorted(ids(result)) == ["cat", "desc"]


def test_empty_search_matches_everything():
    transactions = [make_transaction(id="a", description=None), make_transaction(id="b")]
    assert len(filter_transactions(transactions, TransactionFilters(search=""), today=TODAY)) == 2


def test_type_and_category_filters():
    transactions = [
        make_transaction(id="inc", type="income", category_id="c1"),
        make_transaction(id="exp1", type="expense", category_id="c1"),
        make_transaction(id="exp2", type="expense", category_id="c2"),
    ]

    expenses = filter_transactions(transactions, TransactionFilters(type="expense"), today=TODAY)
    in_c1 = filter_transactions(transactions, TransactionFilters(category="c1"), today=TODAY)

    assert sorted(ids(expenses)) == ["exp1", "exp2"]
    assert sorted(ids(in_c1)) == ["exp1", "inc"]


def test_today_filter_includes_today_only():
    transactions = [
        make_transaction(id="today", date="2024-03-15"),
        make_transaction(id="yesterday", date="2024-03-14"),
    ]

    result = filter_transactions(transactions, TransactionFilters(date_range="today"), today=TODAY)

    assert ids(result) == ["today"]


def test_month_filter_goes_back_exactly_one_calendar_month():
    transactions = [
        make_transaction(id="boundary", date="2024-02-15"),
        make_transaction(id="too_old", date="2024-02-14"),
    ]

    result = filter_transactions(transactions, TransactionFilters(date_range="month"), today=TODAY)

    assert ids(result) == ["boundary"]


def test_week_and_year_bounds():
    transactions = [
        make_transaction(id="week_edge", date="2024-03-08"),
        make_transaction(id="week_out", date="2024-03-07"),
        make_transaction(id="year_edge", date="2023-03-15"),
        make_transaction(id="year_out", date="2023-03-14"),
    ]

    week = filter_transactions(transactions, TransactionFilters(date_range="week"), today=TODAY)
    year = filter_transactions(transactions, TransactionFilters(date_range="year"), today=TODAY)

    assert ids(week) == ["week_edge"]
    assert ids(year) == ["week_edge", "week_out", "year_edge"]


def test_undated_records_never_pass_a_date_range():
    transactions = [make_transaction(id="undated", date=""), make_transaction(id="dated")]

    bounded = filter_transactions(transactions, TransactionFilters(date_range="year"), today=TODAY)
    unbounded = filter_transactions(transactions, TransactionFilters(date_range="all"), today=TODAY)

    assert ids(bounded) == ["dated"]
    assert sorted(ids(unbounded)) == ["dated", "undated"]


def test_sort_by_amount_parses_string_amounts():
    transactions = [
        make_transaction(id="ten", amount="10"),
        make_transaction(id="two", amount="2.5"),
        make_transaction(id="hundred", amount=100),
    ]

    result = filter_transactions(transactions, TransactionFilters(sort_by="amount", sort_order="asc"), today=TODAY)

    assert ids(result) == ["two", "ten", "hundred"]


def test_sort_by_description_treats_missing_as_empty():
    transactions = [
        make_transaction(id="b", description="banana"),
        make_transaction(id="none", description=None),
        make_transaction(id="A", description="Apple"),
    ]

    result = filter_transactions(
        transactions, TransactionFilters(sort_by="description", sort_order="asc"), today=TODAY
    )

    assert ids(result) == ["none", "A", "b"]


def test_from_params_falls_back_to_defaults():
    filters = TransactionFilters.from_params(
        {"search": "  rent ", "type": "bogus", "date_range": "decade", "sort": "AMOUNT", "dir": "sideways"}
    )

    assert filters == TransactionFilters(search="rent", sort_by="amount")

