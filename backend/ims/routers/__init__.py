"""API routers."""
from ims.routers.health import router as health_router
from ims.routers.auth import router as auth_router
from ims.routers.admin import router as admin_router
from ims.routers.inventory import router as inventory_router
from ims.routers.sales import router as sales_router
from ims.routers.expenses import router as expenses_router
from ims.routers.reports import router as reports_router
from ims.routers.banners import router as banners_router
from ims.routers.sync import router as sync_router

__all__ = [
    "health_router",
    "auth_router",
    "admin_router",
    "inventory_router",
    "sales_router",
    "expenses_router",
    "reports_router",
    "banners_router",
    "sync_router",
]
