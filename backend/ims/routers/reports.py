"""Reports router."""
from fastapi import APIRouter, Depends

from ims.context import AppContext
from ims.routers.auth import get_context, get_session
from ims.schemas.operations import FinancialSummary
from ims.services.session import SessionContext

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=FinancialSummary)
async def get_summary(
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    """Total sales, total expenses and net profit for the current tenant."""
    return context.ledger.financial_summary(session)
