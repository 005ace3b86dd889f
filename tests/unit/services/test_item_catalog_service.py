"""Tests for ItemCatalogService."""

import math
from datetime import date

import pytest

from src.core.entities.item import Item, TransactionType
from src.core.exceptions import ItemNotFoundError, ReferentialIntegrityError, ValidationError
from src.core.services.item_catalog import ItemCatalogService


def _assign_id(item: Item) -> Item:
    item.id = 1
    item.version = 1
    return item


@pytest.fixture
def catalog(tx_manager, mock_item_store, fixed_clock):
    mock_item_store.create_item.side_effect = _assign_id
    return ItemCatalogService(
        transaction_manager=tx_manager,
        item_store=mock_item_store,
        clock=fixed_clock,
    )


class TestCreateItem:
    async def test_opening_stock_is_booked(self, catalog, mock_item_store, fixed_clock):
        """Opening stock becomes an 'in' transaction so the ledger sums match."""
        item = await catalog.create_item("Flour", unit="kg", quantity=10.0, cost=20.0)

        assert item.id == 1
        assert item.quantity == 10.0
        assert item.cost == 20.0
        assert item.cost_per_unit == pytest.approx(2.0)

        tx = mock_item_store.add_transaction.call_args[0][0]
        assert tx.item_id == 1
        assert tx.transaction_type == TransactionType.IN
        assert tx.change_quantity == 10.0
        assert tx.cost == 20.0
        assert tx.transaction_date == fixed_clock.now()

    async def test_no_opening_stock(self, catalog, mock_item_store):
        item = await catalog.create_item("Salt", category="spices")
        assert item.quantity == 0.0
        assert item.cost_per_unit == 0.0
        mock_item_store.add_transaction.assert_not_awaited()

    async def test_name_is_trimmed(self, catalog):
        item = await catalog.create_item("  Sugar ")
        assert item.name == "Sugar"

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_empty_name(self, catalog, name):
        with pytest.raises(ValidationError):
            await catalog.create_item(name)

    async def test_negative_quantity(self, catalog):
        with pytest.raises(ValidationError):
            await catalog.create_item("Flour", quantity=-1.0)

    async def test_negative_cost(self, catalog):
        with pytest.raises(ValidationError):
            await catalog.create_item("Flour", quantity=1.0, cost=-1.0)

    async def test_cost_without_quantity(self, catalog, mock_item_store):
        with pytest.raises(ValidationError):
            await catalog.create_item("Flour", cost=5.0)
        mock_item_store.create_item.assert_not_awaited()

    @pytest.mark.parametrize(
        "opening",
        [
            {"quantity": math.nan},
            {"quantity": math.inf},
            {"quantity": 1.0, "cost": math.inf},
        ],
    )
    async def test_non_finite_opening_stock(self, catalog, mock_item_store, opening):
        with pytest.raises(ValidationError):
            await catalog.create_item("Flour", **opening)
        mock_item_store.create_item.assert_not_awaited()


class TestUpdateItem:
    async def test_descriptive_fields(self, catalog, mock_item_store):
        mock_item_store.get_item.return_value = Item(id=1, name="Flour", version=1)

        item = await catalog.update_item(
            1, location="pantry", expiration_date=date(2024, 12, 1)
        )

        assert item.location == "pantry"
        assert item.expiration_date == date(2024, 12, 1)

    @pytest.mark.parametrize("field", ["quantity", "cost", "cost_per_unit"])
    async def test_ledger_fields_rejected(self, catalog, mock_item_store, field):
        with pytest.raises(ValidationError):
            await catalog.update_item(1, **{field: 5.0})
        mock_item_store.update_item.assert_not_awaited()

    async def test_unknown_field_rejected(self, catalog):
        with pytest.raises(ValidationError):
            await catalog.update_item(1, colour="red")

    async def test_missing_item(self, catalog, mock_item_store):
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await catalog.update_item(1, name="Rye")


class TestDeleteItem:
    async def test_delete(self, catalog, mock_item_store):
        mock_item_store.get_item.return_value = Item(id=1, name="Flour")
        mock_item_store.count_ingredient_references.return_value = 0

        await catalog.delete_item(1)

        mock_item_store.delete_item.assert_awaited_once_with(1)

    async def test_delete_used_by_recipe(self, catalog, mock_item_store, tx_manager):
        mock_item_store.get_item.return_value = Item(id=1, name="Flour")
        mock_item_store.count_ingredient_references.return_value = 2

        with pytest.raises(ReferentialIntegrityError):
            await catalog.delete_item(1)

        mock_item_store.delete_item.assert_not_awaited()
        assert tx_manager.rolled_back == 1

    async def test_delete_missing(self, catalog, mock_item_store):
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await catalog.delete_item(1)

    async def test_get_missing(self, catalog, mock_item_store):
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await catalog.get_item(1)
