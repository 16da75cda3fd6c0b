"""Storefront domain: catalogue, carts, orders and customer engagement.

A single Protean domain backs the whole REST API: users and roles, the
product catalogue with its inventory, per-user shopping carts, checkout and
order lifecycle, promotions, reviews, wishlists and in-app notifications.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
