"""
Request objects for the checkout, payment and provisioning services.

Each exposed operation takes one of these instead of a raw dict.
`from_payload()` validates a decoded JSON body field by field before
anything touches the database; `validate()` re-checks the invariants
for callers that build the objects directly.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from ..forms import CheckoutForm, MerchantCreateForm, OrderLineForm, PaymentInitForm, first_error
from .exceptions import ValidationError


def _require_object(payload) -> Dict:
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def _require_text(value, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{name} is required')


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return Decimal(str(value)).is_finite()


def _as_decimal(value):
    """Money arithmetic is Decimal only; ints and floats go through str()"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Decimal(str(value))
    return value


# ==========================================
# CHECKOUT
# ==========================================

@dataclass(frozen=True)
class CustomerContact:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class LineItem:
    product_id: uuid.UUID
    quantity: int
    price: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'price', _as_decimal(self.price))


@dataclass(frozen=True)
class CheckoutRequest:
    merchant_id: uuid.UUID
    customer: CustomerContact
    line_items: Tuple[LineItem, ...]
    total_amount: Decimal
    customer_id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'total_amount', _as_decimal(self.total_amount))

    @classmethod
    def from_payload(cls, payload) -> 'CheckoutRequest':
        payload = _require_object(payload)

        # JSON numbers only; numeric strings are a client bug
        if not _is_number(payload.get('total_amount')):
            raise ValidationError('total_amount must be a number')

        form = CheckoutForm(data=payload)
        if not form.is_valid():
            raise ValidationError(first_error(form))

        order_details = payload.get('order_details')
        if not isinstance(order_details, list) or not order_details:
            raise ValidationError('order_details must be a non-empty array')

        items = []
        for index, raw in enumerate(order_details):
            prefix = f'order_details[{index}].'
            if not isinstance(raw, dict):
                raise ValidationError(f'{prefix[:-1]} must be an object')
            if not _is_number(raw.get('price')):
                raise ValidationError(f'{prefix}price: Each order item must have a numeric price')
            line_form = OrderLineForm(data=raw)
            if not line_form.is_valid():
                raise ValidationError(first_error(line_form, prefix))
            items.append(LineItem(
                product_id=line_form.cleaned_data['product_id'],
                quantity=line_form.cleaned_data['quantity'],
                price=line_form.cleaned_data['price'],
            ))

        data = form.cleaned_data
        request = cls(
            merchant_id=data['admin_id'],
            customer=CustomerContact(
                name=data['customer_name'],
                email=data['customer_email'],
                phone=data['customer_phone'],
            ),
            line_items=tuple(items),
            total_amount=data['total_amount'],
            customer_id=data.get('customer_id'),
        )
        request.validate()
        return request

    def validate(self) -> None:
        if not self.merchant_id:
            raise ValidationError('admin_id is required')
        _require_text(self.customer.name, 'customer_name')
        _require_text(self.customer.email, 'customer_email')
        _require_text(self.customer.phone, 'customer_phone')
        if not _is_number(self.total_amount):
            raise ValidationError('total_amount must be a number')
        if not self.line_items:
            raise ValidationError('order_details must be a non-empty array')

        for item in self.line_items:
            if not item.product_id:
                raise ValidationError('Each order item must have product_id, quantity, and price')
            if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity < 1:
                raise ValidationError('Quantity must be greater than 0')
            if not _is_number(item.price):
                raise ValidationError('Each order item must have product_id, quantity, and price')
            if item.price < 0:
                raise ValidationError('Price must be non-negative')

    @property
    def product_ids(self) -> set:
        return {item.product_id for item in self.line_items}


# ==========================================
# PAYMENT
# ==========================================

@dataclass(frozen=True)
class PaymentRequest:
    order_id: uuid.UUID
    email: str
    amount: Decimal
    merchant_id: uuid.UUID
    customer_name: str
    customer_phone: str

    def __post_init__(self):
        object.__setattr__(self, 'amount', _as_decimal(self.amount))

    @classmethod
    def from_payload(cls, payload) -> 'PaymentRequest':
        payload = _require_object(payload)

        if not _is_number(payload.get('amount')):
            raise ValidationError('Missing required parameters for payment initiation.')

        form = PaymentInitForm(data=payload)
        if not form.is_valid():
            raise ValidationError(first_error(form))

        data = form.cleaned_data
        request = cls(
            order_id=data['order_id'],
            email=data['email'],
            amount=data['amount'],
            merchant_id=data['admin_id'],
            customer_name=data['customer_name'],
            customer_phone=data['customer_phone'],
        )
        request.validate()
        return request

    def validate(self) -> None:
        if not self.order_id or not self.merchant_id:
            raise ValidationError('Missing required parameters for payment initiation.')
        _require_text(self.email, 'email')
        _require_text(self.customer_name, 'customer_name')
        _require_text(self.customer_phone, 'customer_phone')
        if not _is_number(self.amount):
            raise ValidationError('amount must be a number')


# ==========================================
# MERCHANT PROVISIONING
# ==========================================

@dataclass(frozen=True)
class BankDetails:
    account_name: str = ''
    account_number: str = ''
    bank_name: str = ''
    bank_code: str = ''

    @property
    def is_complete(self) -> bool:
        return all([self.account_name, self.account_number, self.bank_name, self.bank_code])


@dataclass(frozen=True)
class MerchantRequest:
    email: str
    name: str
    nin: str
    subdomain: str
    website_name: str
    slug: str = ''
    password: str = ''
    phone: str = ''
    bank: BankDetails = field(default_factory=BankDetails)
    paystack_subaccount_code: str = ''
    primary_color: str = ''
    referral_code: str = ''
    location: str = ''

    @classmethod
    def from_payload(cls, payload) -> 'MerchantRequest':
        form = MerchantCreateForm(data=_require_object(payload))
        if not form.is_valid():
            raise ValidationError(first_error(form))

        data = form.cleaned_data
        request = cls(
            email=data['email'],
            name=data['name'],
            nin=data['nin'],
            subdomain=data['subdomain'],
            website_name=data['website_name'],
            slug=data['slug'],
            password=data.get('password') or '',
            phone=data.get('phone') or '',
            bank=BankDetails(
                account_name=data.get('account_name') or '',
                account_number=data.get('account_number') or '',
                bank_name=data.get('bank_name') or '',
                bank_code=data.get('bank_code') or '',
            ),
            paystack_subaccount_code=data.get('paystack_subaccount_code') or '',
            primary_color=data.get('primary_color') or '',
            referral_code=data.get('referral_code') or '',
            location=data.get('location') or '',
        )
        request.validate()
        return request

    def validate(self) -> None:
        for name in ('name', 'email', 'subdomain', 'nin'):
            _require_text(getattr(self, name), name)
