"""Expenses and the sales-minus-expenses summary."""
import logging

from ims.schemas.records import Expense, Table, today_iso
from ims.services.errors import ValidationFailed
from ims.services.inventory import non_negative
from ims.services.ownership import owned_records
from ims.services.session import SessionContext

logger = logging.getLogger(__name__)


class LedgerService:
    """Expense ledger and financial summary, scoped to the active tenant."""

    def __init__(self, store, sync):
        self.store = store
        self.sync = sync

    def get_expenses(self, ctx: SessionContext) -> list[dict]:
        return owned_records(self.store, Table.EXPENSES, ctx.user)

    def add_expense(self, ctx: SessionContext, name: str, amount, date: str | None = None) -> dict:
        owner = ctx.require_tenant()["username"]
        if not (name or "").strip():
            raise ValidationFailed("Expense name is required")
        amount = non_negative(amount, "Amount")

        expense = Expense(owner=owner, name=name.strip(), amount=amount, date=date or today_iso()).to_wire()

        expenses = self.store.get(Table.EXPENSES)
        expenses.append(expense)
        self.store.put(Table.EXPENSES, expenses)
        self.sync.push_record(Table.EXPENSES, expense)
        logger.info(f"{owner}: expense {expense['name']} {amount}")
        return expense

    def financial_summary(self, ctx: SessionContext) -> dict:
        """Totals over the tenant's own sales and expenses."""
        sales = owned_records(self.store, Table.SALES, ctx.user)
        expenses = owned_records(self.store, Table.EXPENSES, ctx.user)

        total_sales = sum(float(s.get("total") or 0) for s in sales)
        total_expenses = sum(float(e.get("amount") or 0) for e in expenses)
        return {
            "totalSales": total_sales,
            "totalExpenses": total_expenses,
            "netProfit": total_sales - total_expenses,
        }
