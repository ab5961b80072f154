"""Request/response schemas for inventory, sales, expenses and reports."""
from pydantic import Field

from ims.schemas.records import ApiModel, InventoryItem, Purchase


class StockCreate(ApiModel):
    """A purchase that adds stock."""
    vendor: str = ""
    category: str = ""
    brand: str = ""
    model: str = ""
    quantity: int = Field(gt=0)
    cost: float = Field(ge=0)
    payment_type: str = ""


class StockResult(ApiModel):
    purchase: Purchase
    item: InventoryItem


class SaleCreate(ApiModel):
    item_name: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    price: float = Field(ge=0)


class ExpenseCreate(ApiModel):
    name: str = Field(min_length=1)
    amount: float = Field(ge=0)
    date: str | None = None


class FinancialSummary(ApiModel):
    """Sales minus expenses for the current tenant."""
    total_sales: float
    total_expenses: float
    net_profit: float
