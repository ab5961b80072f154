"""Inventory, purchases and sales for the active tenant."""
import logging
from typing import Any

from ims.schemas.records import InventoryItem, Purchase, Sale, Table
from ims.services.errors import InsufficientStock, ValidationFailed
from ims.services.ownership import owned_records
from ims.services.session import SessionContext

logger = logging.getLogger(__name__)


def positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationFailed(f"{name} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationFailed(f"{name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{name} must be a whole number")
    if number <= 0:
        raise ValidationFailed(f"{name} must be greater than zero")
    return number


def non_negative(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{name} must be a number")
    if number < 0 or number != number:
        raise ValidationFailed(f"{name} must not be negative")
    return number


def find_item(inventory: list[dict], owner: str, item_name: str) -> dict | None:
    """Item keyed by (owner, itemName), item name compared ignoring case."""
    wanted = item_name.strip().lower()
    for item in inventory:
        if (
            isinstance(item, dict)
            and item.get("owner") == owner
            and str(item.get("itemName", "")).strip().lower() == wanted
        ):
            return item
    return None


class InventoryService:
    """Stock levels move only through purchases (add_stock) and sales."""

    def __init__(self, store, sync):
        self.store = store
        self.sync = sync

    def get_inventory(self, ctx: SessionContext) -> list[dict]:
        return owned_records(self.store, Table.INVENTORY, ctx.user)

    def get_purchases(self, ctx: SessionContext) -> list[dict]:
        return owned_records(self.store, Table.PURCHASES, ctx.user)

    def get_sales(self, ctx: SessionContext) -> list[dict]:
        return owned_records(self.store, Table.SALES, ctx.user)

    def add_stock(
        self,
        ctx: SessionContext,
        vendor: str,
        category: str,
        brand: str,
        model: str,
        quantity: Any,
        cost: Any,
        payment_type: str = "",
    ) -> tuple[dict, dict]:
        """
        Record a purchase and raise stock for ``"<brand> <model>"``.

        The item's ``avgCost`` becomes the quantity-weighted average of the
        stock on hand and the new purchase. Returns (purchase, item).
        """
        owner = ctx.require_tenant()["username"]
        quantity = positive_int(quantity, "Quantity")
        cost = non_negative(cost, "Cost")
        item_name = f"{(brand or '').strip()} {(model or '').strip()}".strip()
        if not item_name:
            raise ValidationFailed("Brand or model is required")

        purchase = Purchase(
            owner=owner,
            vendor=vendor or "",
            category=category or "",
            brand=brand or "",
            model=model or "",
            item_name=item_name,
            quantity=quantity,
            cost=cost,
            payment_type=payment_type or "",
        ).to_wire()

        inventory = self.store.get(Table.INVENTORY)
        item = find_item(inventory, owner, item_name)
        if item is not None:
            on_hand = int(item.get("quantity") or 0)
            avg_cost = float(item.get("avgCost") or 0.0)
            total_qty = on_hand + quantity
            item["avgCost"] = round((on_hand * avg_cost + quantity * cost) / total_qty, 4)
            item["quantity"] = total_qty
        else:
            item = InventoryItem(owner=owner, item_name=item_name, quantity=quantity, avg_cost=cost).to_wire()
            inventory.append(item)

        purchases = self.store.get(Table.PURCHASES)
        purchases.append(purchase)
        self.store.put(Table.PURCHASES, purchases)
        self.store.put(Table.INVENTORY, inventory)

        self.sync.push_record(Table.PURCHASES, purchase)
        self.sync.push_record(Table.INVENTORY, item)
        logger.info(f"{owner}: +{quantity} {item_name} (now {item['quantity']})")
        return purchase, item

    def process_sale(self, ctx: SessionContext, item_name: str, quantity: Any, price: Any) -> dict:
        """Sell from stock. Rejected without any change if stock is short."""
        owner = ctx.require_tenant()["username"]
        quantity = positive_int(quantity, "Quantity")
        price = non_negative(price, "Price")

        inventory = self.store.get(Table.INVENTORY)
        item = find_item(inventory, owner, item_name or "")
        available = int(item.get("quantity") or 0) if item is not None else 0
        if item is None or available < quantity:
            raise InsufficientStock(f"Insufficient Stock: {available} available, {quantity} requested")

        item["quantity"] = available - quantity
        sale = Sale(
            owner=owner,
            item_name=item["itemName"],
            quantity=quantity,
            price=price,
            total=quantity * price,
        ).to_wire()

        self.store.put(Table.INVENTORY, inventory)
        sales = self.store.get(Table.SALES)
        sales.append(sale)
        self.store.put(Table.SALES, sales)

        self.sync.push_record(Table.INVENTORY, item)
        self.sync.push_record(Table.SALES, sale)
        logger.info(f"{owner}: sold {quantity} {item['itemName']} for {sale['total']}")
        return sale
