# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import auth, cart, health, orders, products

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(cart.router)
api_router.include_router(orders.router)
