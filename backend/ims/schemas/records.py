"""Record schemas shared by the cache, the remote gateway and the API.

Field names on the wire are camelCase (``companyName``, ``itemName``) because
the remote sheet uses them as column headers. Rows read back from the sheet
are loosely typed: numbers can arrive as strings, ids as numbers, and empty
cells as ``""``. The models below absorb those differences so the cache only
ever holds well-typed records.
"""
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Table(str, Enum):
    """Table keys. The local cache key is also the remote wire key."""
    USERS = "ims_users"
    INVENTORY = "ims_inventory"
    SALES = "ims_sales"
    PURCHASES = "ims_purchases"
    EXPENSES = "ims_expenses"
    BANNER = "ims_banner"
    VERTICAL_BANNER = "ims_vertical_banner"


LIST_TABLES = (Table.USERS, Table.INVENTORY, Table.SALES, Table.PURCHASES, Table.EXPENSES)
OWNED_TABLES = (Table.INVENTORY, Table.SALES, Table.PURCHASES, Table.EXPENSES)
SETTING_TABLES = (Table.BANNER, Table.VERTICAL_BANNER)

# Operator-configured endpoint, kept in the cache but never synchronized
SYNC_URL_KEY = "ims_sync_url"


class UserRole(str, Enum):
    """Tenant roles."""
    ADMIN = "Admin"
    USER = "User"


class UserStatus(str, Enum):
    """Tenant approval status."""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def now_iso() -> str:
    """UTC timestamp in the same shape a browser's toISOString() produces."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today_iso() -> str:
    return date.today().isoformat()


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordBase(ApiModel):
    """Base for every synchronized row."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id_prefix: ClassVar[str] = "rec"

    id: str = Field(default="", validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_cells(cls, data: Any) -> Any:
        # The sheet writes 0 and missing values alike as an empty cell, so a
        # blank reads back as the field default (0 for quantities and money)
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and v == "")}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _fill_id(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return new_id(cls.id_prefix)
        return value

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UserRecord(RecordBase):
    """A tenant account."""
    id_prefix: ClassVar[str] = "user"

    company_name: str = ""
    username: str = Field(min_length=1)
    contact_person: str = ""
    password: str = ""
    role: UserRole = UserRole.USER
    status: UserStatus = UserStatus.PENDING


class OwnedRecord(RecordBase):
    """A row scoped to one tenant by username."""
    owner: str = Field(min_length=1)


class InventoryItem(OwnedRecord):
    id_prefix: ClassVar[str] = "inv"

    item_name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    avg_cost: float = 0.0


class Sale(OwnedRecord):
    id_prefix: ClassVar[str] = "sale"

    date: str = Field(default_factory=now_iso)
    item_name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    total: float = 0.0


class Purchase(OwnedRecord):
    id_prefix: ClassVar[str] = "pur"

    date: str = Field(default_factory=now_iso)
    vendor: str = ""
    category: str = ""
    brand: str = ""
    model: str = ""
    item_name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)
    payment_type: str = ""


class Expense(OwnedRecord):
    id_prefix: ClassVar[str] = "exp"

    name: str = Field(min_length=1)
    amount: float = Field(default=0.0, ge=0)
    date: str = Field(default_factory=today_iso)


class SettingRecord(BaseModel):
    """Banner value as pushed to the remote Banner sheet."""
    key: str
    value: str


RECORD_SCHEMAS: dict[Table, type[RecordBase]] = {
    Table.USERS: UserRecord,
    Table.INVENTORY: InventoryItem,
    Table.SALES: Sale,
    Table.PURCHASES: Purchase,
    Table.EXPENSES: Expense,
}
