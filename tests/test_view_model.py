import pytest

from bookstore.catalog.schemas import SORT_KEYS, CatalogItem
from bookstore.catalog.view_model import collation_key, derive


def _item(item_id, name, price):
    return CatalogItem(id=item_id, name=name, price=price, description="", image_url="")


@pytest.fixture
def items():
    return [
        _item(1, "Sách B", 95000),
        _item(2, "sách a", 120000),
        _item(3, "Đắc Nhân Tâm", 80000),
        _item(4, "Bút bi", 5000),
        _item(5, "Sach C", 95000),
    ]


def test_empty_query_returns_everything_in_store_order(items):
    assert derive(items, "", "none") == items
    assert derive(items, "   ", "none") == items
    assert derive(items, None, "none") == items


def test_filter_is_case_insensitive_substring(items):
    result = derive(items, "  SÁCH ", "none")
    assert [item.id for item in result] == [1, 2]
    assert all("sách" in item.name.lower() for item in result)


def test_query_matches_only_requested_book():
    items = [_item(1, "Sách A", 1), _item(2, "Sách B", 2)]
    result = derive(items, "sách a", "name-asc")
    assert [item.name for item in result] == ["Sách A"]


@pytest.mark.parametrize("sort_key", SORT_KEYS)
def test_derive_never_mutates_input(items, sort_key):
    snapshot = list(items)
    derive(items, "", sort_key)
    assert items == snapshot


def test_price_sorts_are_ordered(items):
    asc = derive(items, "", "price-asc")
    desc = derive(items, "", "price-desc")
    assert all(a.price <= b.price for a, b in zip(asc, asc[1:]))
    assert all(a.price >= b.price for a, b in zip(desc, desc[1:]))


def test_price_sort_is_stable_for_equal_prices(items):
    asc = derive(items, "", "price-asc")
    tied = [item.id for item in asc if item.price == 95000]
    assert tied == [1, 5]


def test_name_sorts_ignore_case_and_accents(items):
    asc = [item.name for item in derive(items, "", "name-asc")]
    assert asc == ["Bút bi", "Đắc Nhân Tâm", "sách a", "Sách B", "Sach C"]

    desc = derive(items, "", "name-desc")
    keys = [collation_key(item.name) for item in desc]
    assert keys == sorted(keys, reverse=True)


def test_collation_key_folds_d_stroke():
    assert collation_key("Đắc")[0] == "dac"


def test_unknown_sort_key_is_rejected(items):
    with pytest.raises(ValueError):
        derive(items, "", "rating")
