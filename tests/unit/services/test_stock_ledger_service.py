"""Tests for StockLedgerService."""

import math
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.core.entities.item import InventoryTransaction, Item, TransactionType
from src.core.exceptions import (
    ConcurrentModificationError,
    InsufficientStockError,
    ItemNotFoundError,
    ValidationError,
)
from src.core.services.stock_ledger import StockLedgerService


def _flour(**overrides) -> Item:
    fields = dict(id=1, name="Flour", quantity=10.0, cost=20.0, cost_per_unit=2.0, version=1)
    fields.update(overrides)
    return Item(**fields)


def _stored(tx: InventoryTransaction) -> InventoryTransaction:
    tx.id = 100
    return tx


@pytest.fixture
def mock_recipe_costing():
    costing = AsyncMock()
    costing.recompute_for_item.return_value = [5]
    return costing


@pytest.fixture
def ledger(tx_manager, mock_item_store, mock_recipe_costing, fixed_clock):
    mock_item_store.add_transaction.side_effect = _stored
    return StockLedgerService(
        transaction_manager=tx_manager,
        item_store=mock_item_store,
        recipe_costing=mock_recipe_costing,
        clock=fixed_clock,
    )


class TestRestock:
    async def test_weighted_average_restock(self, ledger, mock_item_store, mock_recipe_costing):
        """10 at 2.0 restocked with 5 costing 12.5 ends at 15 and ~2.1667."""
        mock_item_store.get_item.return_value = _flour()

        result = await ledger.record_transaction(1, "in", 5.0, cost=12.5)

        assert result.item.quantity == 15.0
        assert result.item.cost == pytest.approx(32.5)
        assert result.item.cost_per_unit == pytest.approx(2.1667, abs=1e-4)
        assert result.transaction.id == 100
        assert result.transaction.cost == 12.5
        assert result.recomputed_recipe_ids == [5]
        mock_recipe_costing.recompute_for_item.assert_awaited_once_with(1)

    async def test_restock_without_cost_keeps_unit_cost(
        self, ledger, mock_item_store, mock_recipe_costing
    ):
        """Units restocked without a cost are valued at the current unit cost."""
        mock_item_store.get_item.return_value = _flour()

        result = await ledger.record_transaction(1, TransactionType.IN, 5.0)

        assert result.item.quantity == 15.0
        assert result.item.cost_per_unit == pytest.approx(2.0)
        assert result.transaction.cost == pytest.approx(10.0)
        mock_recipe_costing.recompute_for_item.assert_not_awaited()

    async def test_transaction_date_defaults_to_clock(self, ledger, mock_item_store, fixed_clock):
        mock_item_store.get_item.return_value = _flour()
        result = await ledger.record_transaction(1, "in", 1.0, cost=2.0)
        assert result.transaction.transaction_date == fixed_clock.now()

    async def test_negative_cost_rejected(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "in", 1.0, cost=-1.0)


class TestDeplete:
    async def test_out_reduces_quantity_only(self, ledger, mock_item_store, mock_recipe_costing):
        mock_item_store.get_item.return_value = _flour()

        result = await ledger.record_transaction(1, "out", 4.0, notes="order #1")

        assert result.item.quantity == 6.0
        assert result.item.cost_per_unit == 2.0
        assert result.transaction.transaction_type == TransactionType.OUT
        assert result.transaction.cost is None
        mock_recipe_costing.recompute_for_item.assert_not_awaited()

    async def test_out_to_exactly_zero(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = _flour()
        result = await ledger.record_transaction(1, "out", 10.0)
        assert result.item.quantity == 0.0

    async def test_insufficient_stock(self, ledger, mock_item_store, tx_manager):
        mock_item_store.get_item.return_value = _flour(quantity=5.0)

        with pytest.raises(InsufficientStockError) as exc_info:
            await ledger.record_transaction(1, "out", 6.0)

        shortfall = exc_info.value.shortfalls[0]
        assert shortfall.required == 6.0
        assert shortfall.available == 5.0
        mock_item_store.update_item.assert_not_awaited()
        mock_item_store.add_transaction.assert_not_awaited()
        assert tx_manager.rolled_back == 1

    async def test_cost_on_out_rejected(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "out", 1.0, cost=2.0)


class TestValidation:
    @pytest.mark.parametrize("quantity", [0, -1.0])
    async def test_non_positive_quantity(self, ledger, quantity):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "in", quantity)

    @pytest.mark.parametrize("quantity", [math.nan, math.inf, -math.inf])
    async def test_non_finite_quantity(self, ledger, mock_item_store, quantity):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "in", quantity)
        mock_item_store.get_item.assert_not_awaited()

    @pytest.mark.parametrize("cost", [math.nan, math.inf])
    async def test_non_finite_cost(self, ledger, mock_item_store, cost):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "in", 1.0, cost=cost)
        mock_item_store.update_item.assert_not_awaited()

    async def test_restock_overflowing_stock_value(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = _flour(
            quantity=1e308, cost=1e308, cost_per_unit=1.0
        )
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "in", 1e308)
        mock_item_store.update_item.assert_not_awaited()
        mock_item_store.add_transaction.assert_not_awaited()

    async def test_unknown_type(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.record_transaction(1, "sideways", 1.0)

    async def test_item_not_found(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await ledger.record_transaction(99, "in", 1.0)


class TestConflicts:
    async def test_conflict_is_replayed(self, ledger, mock_item_store, tx_manager):
        """A version conflict rolls back and replays the whole operation."""
        mock_item_store.get_item.side_effect = lambda item_id: _flour()
        mock_item_store.update_item.side_effect = [
            ConcurrentModificationError("item", 1),
            _flour(quantity=6.0, version=2),
        ]

        result = await ledger.record_transaction(1, "out", 4.0)

        assert result.item.quantity == 6.0
        assert mock_item_store.update_item.await_count == 2
        assert mock_item_store.add_transaction.await_count == 1
        assert tx_manager.rolled_back == 1
        assert tx_manager.committed == 1

    async def test_conflict_surfaces_after_retries(self, ledger, mock_item_store):
        mock_item_store.get_item.side_effect = lambda item_id: _flour()
        mock_item_store.update_item.side_effect = ConcurrentModificationError("item", 1)

        with pytest.raises(ConcurrentModificationError):
            await ledger.record_transaction(1, "out", 1.0)

        assert mock_item_store.update_item.await_count == 3

    async def test_joins_open_transaction(self, ledger, mock_item_store, tx_manager):
        mock_item_store.get_item.return_value = _flour()
        async with tx_manager.transaction():
            await ledger.record_transaction(1, "out", 1.0)
        assert tx_manager.committed == 1


class TestReconcile:
    async def test_consistent(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = _flour()
        mock_item_store.sum_transactions.return_value = 10.0
        result = await ledger.reconcile(1)
        assert result.is_consistent

    async def test_mismatch(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = _flour()
        mock_item_store.sum_transactions.return_value = 7.0
        result = await ledger.reconcile(1)
        assert not result.is_consistent
        assert result.ledger_quantity == 7.0

    async def test_list_transactions_missing_item(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await ledger.list_transactions(1)

    async def test_stock_balance(self, ledger, mock_item_store):
        mock_item_store.get_item.return_value = _flour()
        mock_item_store.sum_transactions.return_value = 10.0
        assert await ledger.stock_balance(1) == 10.0
        mock_item_store.sum_transactions.assert_awaited_once_with(1)
