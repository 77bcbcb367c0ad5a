from unittest.mock import MagicMock

import pytest

from storefront.catalog.models import Shirt, Shoe, ShoeQuery
from storefront.catalog.repository import CatalogRepository


class _Resp:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


def _list_client(rows, count):
    client = MagicMock()
    builder = client.table.return_value.select.return_value
    for name in ("eq", "gte", "lte", "ilike", "order", "range"):
        getattr(builder, name).return_value = builder
    builder.execute.return_value = _Resp(rows, count)
    return client


def test_list_returns_items_and_exact_count():
    rows = [{"id": "B1", "title": "Runner", "price": 5000, "image": "i", "brand": "Acme",
             "outer_material": "Mesh", "inner_material": "Textile"}]
    client = _list_client(rows, 42)
    repo = CatalogRepository(client, "shoes", Shoe)

    items, total = repo.list(ShoeQuery())
    assert total == 42
    # Exposé en camelCase
    assert items[0]["outerMaterial"] == "Mesh"
    client.table.return_value.select.assert_called_once_with("*", count="exact")


def test_list_error_propagates():
    client = _list_client([], 0)
    client.table.return_value.select.return_value.execute.side_effect = RuntimeError("boom")
    repo = CatalogRepository(client, "shoes", Shoe)
    with pytest.raises(RuntimeError):
        repo.list(ShoeQuery())


def test_distinct_sorted_without_nulls():
    client = MagicMock()
    client.table.return_value.select.return_value.execute.return_value = _Resp(
        [{"color": "red"}, {"color": None}, {"color": "blue"}, {"color": "red"}]
    )
    repo = CatalogRepository(client, "shirts", Shirt)
    assert repo.distinct("color") == ["blue", "red"]


def test_update_returns_none_when_missing():
    client = MagicMock()
    client.table.return_value.update.return_value.eq.return_value.execute.return_value = _Resp([])
    repo = CatalogRepository(client, "shirts", Shirt)
    assert repo.update("nope", {"price": 10}) is None
    client.table.return_value.update.assert_called_once_with({"price": 10})
    client.table.return_value.update.return_value.eq.assert_called_once_with("id", "nope")


def test_delete_reports_deleted_rows():
    client = MagicMock()
    client.table.return_value.delete.return_value.eq.return_value.execute.return_value = _Resp([{"id": "S1"}])
    repo = CatalogRepository(client, "shirts", Shirt)
    assert repo.delete("S1") is True
