from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase

from apps.stores.models import Order
from apps.stores.services.notifications import EmailService

from .helpers import make_merchant


class EmailServiceTests(TestCase):

    def setUp(self):
        self.service = EmailService(use_mock=False)

    def test_merchant_welcome(self):
        sent = self.service.send_merchant_welcome(
            email='ada@example.com',
            name='Ada',
            website_name='Bee Fashion',
            subdomain='beefashion',
            temp_password='K3M9P2QX',
        )

        self.assertTrue(sent)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['ada@example.com'])
        self.assertIn('K3M9P2QX', mail.outbox[0].body)
        self.assertEqual(mail.outbox[0].alternatives, [])

    def test_tracking_update(self):
        order = Order(
            merchant=make_merchant(),
            customer_name='Chika',
            customer_email='buyer@example.com',
            customer_phone='0809',
            total_amount=Decimal('3000.00'),
            order_reference='GSB-1718000000000-K3M9P2',
            tracking_status=Order.TRACKING_SHIPPED,
            verification_code='4821',
        )

        self.assertTrue(self.service.send_order_tracking_update(order))
        self.assertEqual(mail.outbox[0].subject, 'Order GSB-1718000000000-K3M9P2: Shipped')
        self.assertIn('4821', mail.outbox[0].body)

    def test_backend_failure_is_reported_not_raised(self):
        with mock.patch(
            'core.utils.email_service.send_mail', side_effect=OSError('smtp down')
        ):
            self.assertFalse(self.service.send_email('a@example.com', 'Hi', 'Body'))

    def test_mock_mode_sends_nothing(self):
        self.assertTrue(EmailService(use_mock=True).send_email('a@example.com', 'Hi', 'Body'))
        self.assertEqual(len(mail.outbox), 0)
