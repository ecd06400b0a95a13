"""
Payment split initiation: work out what the merchant earned on an order,
ask Paystack for a hosted checkout that routes that share to the
merchant's sub-account, and stamp the new reference on the order.
"""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Sequence, Tuple
from urllib.parse import quote

from ..models import Merchant, Order, OrderItem, Product
from .config import PlatformConfig
from .exceptions import GatewayError, NotFoundError
from .paystack import PaystackService
from .schemas import PaymentRequest
from .utils import format_currency, generate_reference, normalize_phone, quantize_money

logger = logging.getLogger(__name__)


PriceSource = Tuple[str, Callable[[OrderItem, Product], Optional[Decimal]]]

# Merchant's earned unit price, first truthy source wins
BASE_PRICE_SOURCES: Sequence[PriceSource] = (
    ('product_price', lambda item, product: product.price),
    ('original_price', lambda item, product: product.original_price),
    ('line_price', lambda item, product: item.price),
)


def resolve_base_price(
    item: OrderItem,
    product: Product,
    sources: Sequence[PriceSource] = BASE_PRICE_SOURCES
) -> Decimal:
    """
    Walk the price sources in order and return the first non-empty,
    non-zero value; 0.00 when none has one.
    """
    for name, source in sources:
        value = source(item, product)
        if value:
            logger.debug(f'Base price for product {product.id} from {name}: {value}')
            return Decimal(value)
    return Decimal('0.00')


def build_support_link(phone: str, reference: str, amount: Decimal, customer_name: str, customer_phone: str) -> Optional[str]:
    """WhatsApp deep link the customer can use to reach the merchant"""
    number = normalize_phone(phone)
    if not number:
        return None

    message = (
        f'Hello! I just completed payment for order {reference} worth {format_currency(amount)}. '
        f'Please confirm and prepare my items for delivery. '
        f'Customer: {customer_name}, Phone: {customer_phone}'
    )
    return f'https://wa.me/{number}?text={quote(message)}'


@dataclass(frozen=True)
class PaymentInitiation:
    authorization_url: str
    access_code: str
    reference: str
    redirect_url: Optional[str]

    def as_dict(self) -> Dict:
        return asdict(self)


class PaymentSplitService:

    def __init__(self, config: PlatformConfig, gateway: Optional[PaystackService] = None):
        self.config = config
        self.db = config.catalog_connection
        self.gateway = gateway or PaystackService(config)

    def initiate_payment(self, request: PaymentRequest) -> PaymentInitiation:
        """
        Start a hosted Paystack checkout for an existing pending order.

        Safe to call again for the same order: every call mints a new
        reference, and the order stays pending until settlement.

        Raises:
            ValidationError: malformed request
            NotFoundError: merchant, order, order items or products missing
            GatewayError: Paystack rejected the transaction
        """
        request.validate()

        merchant = Merchant.objects.using(self.db).filter(pk=request.merchant_id).first()
        if merchant is None:
            raise NotFoundError('Admin not found')

        order = Order.objects.using(self.db).filter(pk=request.order_id, merchant=merchant).first()
        if order is None:
            raise NotFoundError('Order not found')

        items = list(order.items.using(self.db).all())
        if not items:
            raise NotFoundError('Order details not found')

        merchant_total = self._merchant_earned_total(items)
        reference = generate_reference(self.config.reference_prefix)

        split = None
        if merchant.has_payout_account:
            split = self.gateway.build_flat_split(merchant.paystack_subaccount_code, merchant_total)
            if merchant_total > request.amount:
                logger.warning(
                    f'Merchant share {merchant_total} exceeds charge {request.amount} for order {order.pk}'
                )
        else:
            # Whole charge stays on the platform account until a manual payout
            logger.warning(f'No subaccount code for admin {merchant.pk}, using main account')

        success, data = self.gateway.initialize_payment(
            email=request.email,
            amount=request.amount,
            reference=reference,
            callback_url=self.config.callback_url(reference),
            webhook_url=self.config.webhook_url,
            metadata=self._build_metadata(request, merchant, reference),
            split=split,
        )
        if not success:
            raise GatewayError(data.get('error') or 'Payment initialization failed')

        order.order_reference = reference
        order.payment_status = Order.PAYMENT_PENDING
        order.customer_name = request.customer_name
        order.customer_email = request.email
        order.customer_phone = request.customer_phone
        order.total_amount = quantize_money(request.amount)
        order.save(using=self.db, update_fields=[
            'order_reference', 'payment_status', 'customer_name',
            'customer_email', 'customer_phone', 'total_amount', 'updated_at',
        ])

        logger.info(
            f'Payment initiated: order={order.pk} reference={reference} '
            f'amount={request.amount} merchant_share={merchant_total if split else 0}'
        )

        return PaymentInitiation(
            authorization_url=data.get('authorization_url'),
            access_code=data.get('access_code'),
            reference=reference,
            redirect_url=build_support_link(
                merchant.phone, reference, request.amount,
                request.customer_name, request.customer_phone
            ),
        )

    def _merchant_earned_total(self, items) -> Decimal:
        product_ids = {item.product_id for item in items}
        products = Product.objects.using(self.db).in_bulk(list(product_ids))

        total = Decimal('0')
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError(f'Product with ID {item.product_id} not found')
            total += resolve_base_price(item, product) * item.quantity

        return quantize_money(total)

    def _build_metadata(self, request: PaymentRequest, merchant: Merchant, reference: str) -> Dict:
        return {
            'order_id': str(request.order_id),
            'admin_id': str(merchant.pk),
            'customer_name': request.customer_name,
            'customer_phone': request.customer_phone,
            'admin_phone': merchant.phone,
            'website_name': merchant.website_name,
            'custom_fields': [
                {'display_name': 'Order Reference', 'variable_name': 'order_reference', 'value': reference},
                {'display_name': 'Store Name', 'variable_name': 'store_name', 'value': merchant.website_name},
            ],
        }
