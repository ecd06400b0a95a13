import uuid
from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

import requests
from django.test import SimpleTestCase, TestCase

from apps.stores.models import Order
from apps.stores.services.checkout import CheckoutService
from apps.stores.services.exceptions import GatewayError, NotFoundError
from apps.stores.services.payments import PaymentSplitService, resolve_base_price
from apps.stores.services.schemas import CheckoutRequest, CustomerContact, LineItem, PaymentRequest
from apps.stores.services.utils import is_valid_reference

from .helpers import make_config, make_merchant, make_product, paystack_response


def _initialized(reference='ignored'):
    return paystack_response({
        'status': True,
        'message': 'Authorization URL created',
        'data': {
            'authorization_url': 'https://checkout.paystack.com/abc123',
            'access_code': 'abc123',
            'reference': reference,
        },
    })


@mock.patch('apps.stores.services.paystack.requests.post')
class PaymentSplitServiceTests(TestCase):

    def setUp(self):
        self.merchant = make_merchant(paystack_subaccount_code='ACCT_8f4s1eq7ml6rlzj')
        self.product = make_product(self.merchant, price='1200.00', original_price='1000.00')
        self.config = make_config()
        self.order = CheckoutService(self.config).create_order(CheckoutRequest(
            merchant_id=self.merchant.id,
            customer=CustomerContact(name='Chika', email='buyer@example.com', phone='08099999999'),
            line_items=(LineItem(product_id=self.product.id, quantity=2, price=Decimal('1200.00')),),
            total_amount=Decimal('2400.00'),
        ))
        self.service = PaymentSplitService(self.config)

    def _request(self, amount='2500.00', order_id=None, merchant_id=None, email='pay@example.com'):
        return PaymentRequest(
            order_id=order_id or self.order.id,
            email=email,
            amount=Decimal(amount),
            merchant_id=merchant_id or self.merchant.id,
            customer_name='Chika Obi',
            customer_phone='08011112222',
        )

    def test_initialize_with_flat_split(self, mock_post):
        mock_post.return_value = _initialized()

        result = self.service.initiate_payment(self._request())

        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs['json']
        self.assertEqual(url, 'https://api.paystack.co/transaction/initialize')
        self.assertEqual(payload['amount'], 250000)
        self.assertEqual(payload['email'], 'pay@example.com')
        self.assertEqual(payload['split'], {
            'type': 'flat',
            'currency': 'NGN',
            'subaccounts': [{'subaccount': 'ACCT_8f4s1eq7ml6rlzj', 'share': 240000}],
            'bearer_type': 'account',
        })
        self.assertNotIn('split', payload['metadata'])
        self.assertEqual(payload['metadata']['order_id'], str(self.order.id))
        self.assertEqual(payload['metadata']['admin_id'], str(self.merchant.id))
        self.assertEqual(payload['callback_url'], f'https://shop.example.com/payment-success?reference={result.reference}')
        self.assertEqual(payload['webhook_url'], 'https://api.example.com/api/payments/webhook/')
        self.assertEqual(mock_post.call_args.kwargs['headers']['Authorization'], 'Bearer sk_test_123')

        self.assertEqual(result.authorization_url, 'https://checkout.paystack.com/abc123')
        self.assertEqual(result.access_code, 'abc123')
        self.assertEqual(payload['reference'], result.reference)

    def test_order_updated_with_new_reference(self, mock_post):
        mock_post.return_value = _initialized()
        checkout_reference = self.order.order_reference

        result = self.service.initiate_payment(self._request())

        self.order.refresh_from_db()
        self.assertNotEqual(result.reference, checkout_reference)
        self.assertTrue(is_valid_reference(result.reference))
        self.assertEqual(self.order.order_reference, result.reference)
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(self.order.total_amount, Decimal('2500.00'))
        self.assertEqual(self.order.customer_email, 'pay@example.com')
        self.assertEqual(self.order.customer_name, 'Chika Obi')

    def test_reinitiation_mints_distinct_references(self, mock_post):
        mock_post.return_value = _initialized()

        first = self.service.initiate_payment(self._request())
        second = self.service.initiate_payment(self._request())

        self.order.refresh_from_db()
        self.assertNotEqual(first.reference, second.reference)
        self.assertEqual(self.order.order_reference, second.reference)
        self.assertEqual(self.order.merchant_id, self.merchant.id)
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)

    def test_no_subaccount_sends_no_split(self, mock_post):
        mock_post.return_value = _initialized()
        self.merchant.paystack_subaccount_code = None
        self.merchant.save()

        with self.assertLogs('apps.stores.services.payments', level='WARNING'):
            self.service.initiate_payment(self._request())

        payload = mock_post.call_args.kwargs['json']
        self.assertNotIn('split', payload)
        self.assertEqual(payload['amount'], 250000)

    def test_gateway_rejection_passes_message_through(self, mock_post):
        mock_post.return_value = paystack_response({'status': False, 'message': 'Invalid split code'}, status_code=400)
        checkout_reference = self.order.order_reference

        with self.assertRaises(GatewayError) as ctx:
            self.service.initiate_payment(self._request())

        self.assertEqual(ctx.exception.message, 'Invalid split code')
        self.assertEqual(ctx.exception.status_code, 502)
        self.order.refresh_from_db()
        self.assertEqual(self.order.order_reference, checkout_reference)

    def test_gateway_timeout(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()

        with self.assertRaises(GatewayError) as ctx:
            self.service.initiate_payment(self._request())

        self.assertIn('timeout', ctx.exception.message.lower())

    def test_missing_secret_key_fails(self, mock_post):
        service = PaymentSplitService(make_config(gateway_api_key='', use_mock_gateway=False))
        checkout_reference = self.order.order_reference

        with self.assertRaisesMessage(GatewayError, 'Paystack secret key not configured'):
            service.initiate_payment(self._request())

        mock_post.assert_not_called()
        self.order.refresh_from_db()
        self.assertEqual(self.order.order_reference, checkout_reference)

    def test_float_amount_is_charged_in_kobo(self, mock_post):
        mock_post.return_value = _initialized()
        request = PaymentRequest(
            order_id=self.order.id,
            email='pay@example.com',
            amount=2500.5,
            merchant_id=self.merchant.id,
            customer_name='Chika Obi',
            customer_phone='08011112222',
        )

        self.service.initiate_payment(request)

        self.assertEqual(mock_post.call_args.kwargs['json']['amount'], 250050)
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal('2500.50'))

    def test_unknown_merchant(self, mock_post):
        with self.assertRaisesMessage(NotFoundError, 'Admin not found'):
            self.service.initiate_payment(self._request(merchant_id=uuid.uuid4()))
        mock_post.assert_not_called()

    def test_unknown_order(self, mock_post):
        with self.assertRaises(NotFoundError):
            self.service.initiate_payment(self._request(order_id=uuid.uuid4()))
        mock_post.assert_not_called()

    def test_order_of_another_merchant(self, mock_post):
        other = make_merchant(subdomain='otherstore')

        with self.assertRaises(NotFoundError):
            self.service.initiate_payment(self._request(merchant_id=other.id))
        mock_post.assert_not_called()

    def test_share_falls_back_to_original_price(self, mock_post):
        mock_post.return_value = _initialized()
        self.product.price = Decimal('0.00')
        self.product.save()

        self.service.initiate_payment(self._request())

        split = mock_post.call_args.kwargs['json']['split']
        self.assertEqual(split['subaccounts'][0]['share'], 200000)

    def test_support_link(self, mock_post):
        mock_post.return_value = _initialized()

        result = self.service.initiate_payment(self._request())

        self.assertTrue(result.redirect_url.startswith('https://wa.me/2348012345678?text='))
        self.assertIn(result.reference, result.redirect_url)

    def test_mock_gateway_makes_no_http_call(self, mock_post):
        service = PaymentSplitService(make_config(use_mock_gateway=True))

        result = service.initiate_payment(self._request())

        mock_post.assert_not_called()
        self.assertIn(result.reference, result.authorization_url)


class ResolveBasePriceTests(SimpleTestCase):

    def _resolve(self, price, original_price, line_price):
        product = SimpleNamespace(id=uuid.uuid4(), price=price, original_price=original_price)
        item = SimpleNamespace(price=line_price)
        return resolve_base_price(item, product)

    def test_product_price_wins(self):
        self.assertEqual(self._resolve(Decimal('1200'), Decimal('1000'), Decimal('900')), Decimal('1200'))

    def test_original_price_when_price_is_zero(self):
        self.assertEqual(self._resolve(Decimal('0'), Decimal('1000'), Decimal('900')), Decimal('1000'))

    def test_line_price_when_catalog_prices_empty(self):
        self.assertEqual(self._resolve(None, Decimal('0'), Decimal('900')), Decimal('900'))

    def test_zero_when_nothing_set(self):
        self.assertEqual(self._resolve(None, None, Decimal('0')), Decimal('0.00'))
