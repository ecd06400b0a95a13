"""
Order intake: turn a storefront cart into a pending order, re-deriving
every price from the catalog instead of trusting the client.
"""

import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction

from ..models import CustomerProfile, Merchant, Order, OrderItem, Product
from .config import PlatformConfig
from .exceptions import NotFoundError, PriceMismatchError, TotalMismatchError
from .schemas import CheckoutRequest
from .utils import generate_reference, quantize_money, within_tolerance

logger = logging.getLogger(__name__)


class CheckoutService:

    def __init__(self, config: PlatformConfig):
        self.config = config
        self.db = config.catalog_connection

    def create_order(self, request: CheckoutRequest) -> Order:
        """
        Validate a cart against the catalog and persist a pending order.

        Raises:
            ValidationError: malformed request
            NotFoundError: merchant or any product missing
            PriceMismatchError: a claimed unit price is off by more than 0.01
            TotalMismatchError: the claimed total is off by more than 0.01
        """
        request.validate()

        merchant = Merchant.objects.using(self.db).filter(pk=request.merchant_id).first()
        if merchant is None:
            raise NotFoundError('Merchant not found')

        if request.customer_id and not get_user_model().objects.using(self.db).filter(pk=request.customer_id).exists():
            raise NotFoundError('Customer not found')

        products = self._fetch_products(merchant, request.product_ids)
        calculated_total = self._verify_prices(request, products)

        if not within_tolerance(calculated_total, request.total_amount):
            raise TotalMismatchError(
                f'Total amount mismatch. Calculated: {calculated_total}, Received: {request.total_amount}'
            )

        order_reference = generate_reference(self.config.reference_prefix)

        with transaction.atomic(using=self.db):
            order = Order.objects.using(self.db).create(
                merchant=merchant,
                customer_id=request.customer_id,
                customer_name=request.customer.name,
                customer_email=request.customer.email,
                customer_phone=request.customer.phone,
                total_amount=quantize_money(calculated_total),
                order_reference=order_reference,
                payment_status=Order.PAYMENT_PENDING,
                tracking_status=Order.TRACKING_PROCESSING,
            )
            OrderItem.objects.using(self.db).bulk_create([
                OrderItem(
                    order=order,
                    product=products[item.product_id],
                    quantity=item.quantity,
                    price=products[item.product_id].price,
                    total=quantize_money(products[item.product_id].price * item.quantity),
                )
                for item in request.line_items
            ])

            if not request.customer_id:
                self._upsert_customer(request)

        logger.info(
            f'Order created: {order_reference} merchant={merchant.pk} '
            f'items={len(request.line_items)} total={order.total_amount}'
        )
        return order

    def _fetch_products(self, merchant: Merchant, product_ids: set) -> dict:
        """One batch lookup, scoped to the merchant's own catalog"""
        products = Product.objects.using(self.db).filter(merchant=merchant).in_bulk(list(product_ids))

        if len(products) != len(product_ids):
            missing = sorted(str(pid) for pid in product_ids - set(products))
            raise NotFoundError(f'One or more products not found: {", ".join(missing)}')

        return products

    def _verify_prices(self, request: CheckoutRequest, products: dict) -> Decimal:
        calculated_total = Decimal('0')

        for item in request.line_items:
            product = products[item.product_id]
            if not within_tolerance(item.price, product.price):
                raise PriceMismatchError(
                    f'Price mismatch for product {item.product_id}. '
                    f'Expected: {product.price}, Received: {item.price}'
                )
            calculated_total += product.price * item.quantity

        return calculated_total

    def _upsert_customer(self, request: CheckoutRequest) -> CustomerProfile:
        profile, created = CustomerProfile.objects.using(self.db).update_or_create(
            email=request.customer.email.lower(),
            defaults={
                'name': request.customer.name,
                'phone': request.customer.phone,
            }
        )
        logger.debug(f'Customer profile {"created" if created else "updated"}: {profile.email}')
        return profile
