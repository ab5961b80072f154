"""Pydantic schemas for API request/response."""
from ims.schemas.records import (
    Table, UserRole, UserStatus,
    UserRecord, InventoryItem, Sale, Purchase, Expense, SettingRecord,
)
from ims.schemas.user import UserRegister, UserRead, StatusUpdate, PasswordReset, Token, TokenData
from ims.schemas.operations import StockCreate, StockResult, SaleCreate, ExpenseCreate, FinancialSummary
from ims.schemas.sync import SyncStatus, EndpointUpdate, PublishResult, BannerUpdate, Banners

__all__ = [
    "Table", "UserRole", "UserStatus",
    "UserRecord", "InventoryItem", "Sale", "Purchase", "Expense", "SettingRecord",
    "UserRegister", "UserRead", "StatusUpdate", "PasswordReset", "Token", "TokenData",
    "StockCreate", "StockResult", "SaleCreate", "ExpenseCreate", "FinancialSummary",
    "SyncStatus", "EndpointUpdate", "PublishResult", "BannerUpdate", "Banners",
]
