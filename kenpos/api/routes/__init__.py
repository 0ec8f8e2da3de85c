"""API route modules."""

from kenpos.api.routes.cart import router as cart_router
from kenpos.api.routes.data import router as data_router
from kenpos.api.routes.health import router as health_router
from kenpos.api.routes.purchasing import invoices_router as supplier_invoices_router
from kenpos.api.routes.purchasing import router as purchase_orders_router
from kenpos.api.routes.quotations import router as quotations_router
from kenpos.api.routes.registry import customers_router, products_router, suppliers_router
from kenpos.api.routes.sales import router as sales_router
from kenpos.api.routes.shifts import router as shifts_router
from kenpos.api.routes.sync import router as sync_router

__all__ = [
    "cart_router",
    "customers_router",
    "data_router",
    "health_router",
    "products_router",
    "purchase_orders_router",
    "quotations_router",
    "sales_router",
    "shifts_router",
    "supplier_invoices_router",
    "suppliers_router",
    "sync_router",
]
