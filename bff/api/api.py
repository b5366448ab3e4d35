"""
Aggregates all endpoint route tables under the API prefix.

Order matters: first match wins, so literal segments
(/users/check-email, /products/batch) register ahead of {id} patterns.
"""

from bff.api.routing import RouteTable
from bff.core.config import settings
from bff.handlers import addresses, auth, carts, categories, files, orders, payment_methods, products, users

api_router = RouteTable(prefix=settings.API_PREFIX)

api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(categories.router)
api_router.include_router(orders.router)
api_router.include_router(users.router)
api_router.include_router(carts.router)
api_router.include_router(addresses.router)
api_router.include_router(payment_methods.router)
api_router.include_router(files.router)
