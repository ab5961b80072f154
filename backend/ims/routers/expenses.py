"""Expenses router."""
from typing import List

from fastapi import APIRouter, Depends, status

from ims.context import AppContext
from ims.routers.auth import get_context, get_session
from ims.schemas.operations import ExpenseCreate
from ims.schemas.records import Expense
from ims.services.session import SessionContext

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[Expense])
async def get_expenses(
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    return context.ledger.get_expenses(session)


@router.post("", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def add_expense(
    payload: ExpenseCreate,
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    return context.ledger.add_expense(session, payload.name, payload.amount, payload.date)
