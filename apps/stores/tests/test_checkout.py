import uuid
from decimal import Decimal

from django.test import TestCase

from apps.stores.models import CustomerProfile, Order, OrderItem
from apps.stores.services.checkout import CheckoutService
from apps.stores.services.exceptions import (
    NotFoundError, PriceMismatchError, TotalMismatchError, ValidationError
)
from apps.stores.services.schemas import CheckoutRequest, CustomerContact, LineItem
from apps.stores.services.utils import is_valid_reference

from .helpers import make_config, make_merchant, make_product, make_user


class CheckoutServiceTests(TestCase):

    def setUp(self):
        self.merchant = make_merchant()
        self.gown = make_product(self.merchant, price='1500.00')
        self.shoe = make_product(self.merchant, price='2500.50', name='Loafers', category='Shoes')
        self.service = CheckoutService(make_config())

    def _request(self, lines=None, total='5500.50', customer_id=None, email='buyer@example.com', name='Chika'):
        lines = lines if lines is not None else [
            (self.gown.id, 2, '1500.00'),
            (self.shoe.id, 1, '2500.50'),
        ]
        return CheckoutRequest(
            merchant_id=self.merchant.id,
            customer=CustomerContact(name=name, email=email, phone='08099999999'),
            line_items=tuple(
                LineItem(product_id=pid, quantity=qty, price=Decimal(price))
                for pid, qty, price in lines
            ),
            total_amount=Decimal(total),
            customer_id=customer_id,
        )

    def test_creates_pending_order_with_items(self):
        order = self.service.create_order(self._request())

        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(order.tracking_status, Order.TRACKING_PROCESSING)
        self.assertEqual(order.total_amount, Decimal('5500.50'))
        self.assertEqual(order.merchant, self.merchant)
        self.assertEqual(OrderItem.objects.filter(order=order).count(), 2)

        gown_line = OrderItem.objects.get(order=order, product=self.gown)
        self.assertEqual(gown_line.quantity, 2)
        self.assertEqual(gown_line.price, Decimal('1500.00'))
        self.assertEqual(gown_line.total, Decimal('3000.00'))

    def test_reference_format(self):
        order = self.service.create_order(self._request())

        self.assertTrue(is_valid_reference(order.order_reference))
        self.assertTrue(order.order_reference.startswith('GSB-'))

    def test_references_are_unique(self):
        references = [self.service.create_order(self._request()).order_reference for _ in range(20)]

        self.assertEqual(len(set(references)), 20)
        self.assertTrue(all(is_valid_reference(reference) for reference in references))

    def test_float_amounts_are_accepted(self):
        request = CheckoutRequest(
            merchant_id=self.merchant.id,
            customer=CustomerContact(name='Chika', email='buyer@example.com', phone='08099999999'),
            line_items=(LineItem(product_id=self.gown.id, quantity=2, price=1500.0),),
            total_amount=3000.0,
        )

        request.validate()
        order = self.service.create_order(request)

        self.assertEqual(order.total_amount, Decimal('3000.00'))
        self.assertEqual(request.line_items[0].price, Decimal('1500.0'))

    def test_prices_within_a_cent_are_accepted(self):
        request = self._request(
            lines=[(self.gown.id, 1, '1500.01')],
            total='1499.99',
        )
        order = self.service.create_order(request)

        # Stored total is the catalog total, not the client's
        self.assertEqual(order.total_amount, Decimal('1500.00'))
        self.assertEqual(order.items.get().price, Decimal('1500.00'))

    def test_price_mismatch_rejected_and_nothing_written(self):
        request = self._request(lines=[(self.gown.id, 1, '1499.98')], total='1499.98')

        with self.assertRaises(PriceMismatchError) as ctx:
            self.service.create_order(request)

        self.assertIn(str(self.gown.id), ctx.exception.message)
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(Order.objects.count(), 0)

    def test_total_mismatch_rejected(self):
        with self.assertRaises(TotalMismatchError) as ctx:
            self.service.create_order(self._request(total='5500.52'))

        self.assertIn('Calculated: 5500.50', ctx.exception.message)
        self.assertEqual(Order.objects.count(), 0)

    def test_missing_product_rejected(self):
        missing = uuid.uuid4()
        request = self._request(lines=[(self.gown.id, 1, '1500.00'), (missing, 1, '10.00')], total='1510.00')

        with self.assertRaises(NotFoundError) as ctx:
            self.service.create_order(request)

        self.assertIn(str(missing), ctx.exception.message)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(CustomerProfile.objects.count(), 0)

    def test_other_merchants_product_rejected(self):
        other = make_merchant(subdomain='otherstore')
        foreign = make_product(other, price='1500.00')
        request = self._request(lines=[(foreign.id, 1, '1500.00')], total='1500.00')

        with self.assertRaises(NotFoundError):
            self.service.create_order(request)

    def test_unknown_merchant_rejected(self):
        request = self._request()
        request = CheckoutRequest(
            merchant_id=uuid.uuid4(),
            customer=request.customer,
            line_items=request.line_items,
            total_amount=request.total_amount,
        )

        with self.assertRaises(NotFoundError):
            self.service.create_order(request)

    def test_guest_checkout_upserts_customer_profile(self):
        self.service.create_order(self._request(email='Buyer@Example.com', name='Chika'))
        self.service.create_order(self._request(email='buyer@example.com', name='Chika Obi'))

        profile = CustomerProfile.objects.get()
        self.assertEqual(profile.email, 'buyer@example.com')
        self.assertEqual(profile.name, 'Chika Obi')

    def test_registered_customer_links_order(self):
        customer = make_user('member@example.com')
        order = self.service.create_order(self._request(customer_id=customer.pk))

        self.assertEqual(order.customer, customer)
        self.assertEqual(CustomerProfile.objects.count(), 0)

    def test_unknown_customer_rejected(self):
        with self.assertRaises(NotFoundError):
            self.service.create_order(self._request(customer_id=999999))

    def test_zero_quantity_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.create_order(self._request(lines=[(self.gown.id, 0, '1500.00')], total='0'))

    def test_oversell_is_not_blocked(self):
        request = self._request(lines=[(self.gown.id, 50, '1500.00')], total='75000.00')
        order = self.service.create_order(request)

        self.gown.refresh_from_db()
        self.assertEqual(order.total_amount, Decimal('75000.00'))
        self.assertEqual(self.gown.units_available, 5)


class CheckoutRequestPayloadTests(TestCase):

    def _payload(self, **overrides):
        payload = {
            'admin_id': str(uuid.uuid4()),
            'customer_name': 'Chika',
            'customer_email': 'buyer@example.com',
            'customer_phone': '08099999999',
            'total_amount': 3000,
            'order_details': [
                {'product_id': str(uuid.uuid4()), 'quantity': 2, 'price': 1500.0},
            ],
        }
        payload.update(overrides)
        return payload

    def test_valid_payload(self):
        request = CheckoutRequest.from_payload(self._payload())

        self.assertEqual(request.total_amount, Decimal('3000'))
        self.assertEqual(len(request.line_items), 1)
        self.assertEqual(request.line_items[0].quantity, 2)
        self.assertIsNone(request.customer_id)

    def test_empty_order_details(self):
        with self.assertRaisesMessage(ValidationError, 'order_details must be a non-empty array'):
            CheckoutRequest.from_payload(self._payload(order_details=[]))

    def test_total_must_be_a_number(self):
        with self.assertRaisesMessage(ValidationError, 'total_amount must be a number'):
            CheckoutRequest.from_payload(self._payload(total_amount='3000'))

    def test_non_finite_total_rejected(self):
        with self.assertRaisesMessage(ValidationError, 'total_amount must be a number'):
            CheckoutRequest.from_payload(self._payload(total_amount=float('nan')))

    def test_negative_price(self):
        lines = [{'product_id': str(uuid.uuid4()), 'quantity': 1, 'price': -5}]
        with self.assertRaisesMessage(ValidationError, 'Price must be non-negative'):
            CheckoutRequest.from_payload(self._payload(order_details=lines))

    def test_zero_quantity(self):
        lines = [{'product_id': str(uuid.uuid4()), 'quantity': 0, 'price': 10}]
        with self.assertRaisesMessage(ValidationError, 'Quantity must be greater than 0'):
            CheckoutRequest.from_payload(self._payload(order_details=lines))

    def test_missing_contact_field(self):
        payload = self._payload()
        del payload['customer_phone']

        with self.assertRaisesMessage(ValidationError, 'customer_phone'):
            CheckoutRequest.from_payload(payload)

    def test_body_must_be_an_object(self):
        with self.assertRaises(ValidationError):
            CheckoutRequest.from_payload(['not', 'an', 'object'])
