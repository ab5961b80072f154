"""Inventory router: stock on hand, purchases and restocking."""
from typing import List

from fastapi import APIRouter, Depends, status

from ims.context import AppContext
from ims.routers.auth import get_context, get_session
from ims.schemas.operations import StockCreate, StockResult
from ims.schemas.records import InventoryItem, Purchase
from ims.services.session import SessionContext

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=List[InventoryItem])
async def get_inventory(
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    """Items owned by the current tenant."""
    return context.inventory.get_inventory(session)


@router.get("/purchases", response_model=List[Purchase])
async def get_purchases(
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    return context.inventory.get_purchases(session)


@router.post("/stock", response_model=StockResult, status_code=status.HTTP_201_CREATED)
async def add_stock(
    payload: StockCreate,
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    """Record a purchase and add its quantity to stock."""
    purchase, item = context.inventory.add_stock(
        session,
        vendor=payload.vendor,
        category=payload.category,
        brand=payload.brand,
        model=payload.model,
        quantity=payload.quantity,
        cost=payload.cost,
        payment_type=payload.payment_type,
    )
    return {"purchase": purchase, "item": item}
