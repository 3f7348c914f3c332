"""Checkout, payment capture and order management."""

from app.features.orders.models import Order
from app.features.orders.routes import router
from app.features.orders.service import OrderService, compute_payment_signature

__all__ = ["Order", "OrderService", "compute_payment_signature", "router"]
