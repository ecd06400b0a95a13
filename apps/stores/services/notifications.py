"""
Notification Service
Transactional emails for merchants and customers

Delivery is best-effort: a failed send is logged and reported as False,
never raised into the operation that triggered it.

Settings:
- EMAIL_BACKEND, EMAIL_HOST, EMAIL_PORT, EMAIL_HOST_USER, EMAIL_HOST_PASSWORD
- DEFAULT_FROM_EMAIL
- USE_MOCK_NOTIFICATIONS (log instead of sending)
- PLATFORM_LOGIN_URL, PLATFORM_DOMAIN
"""

import logging
from typing import Optional

from django.conf import settings

from core.utils.email_service import send_platform_email
from .utils import format_currency

logger = logging.getLogger(__name__)


class EmailService:
    """
    Email service on top of Django's email backend
    """

    def __init__(self, use_mock: Optional[bool] = None):
        if use_mock is None:
            use_mock = getattr(settings, 'USE_MOCK_NOTIFICATIONS', True)
        self.use_mock = use_mock
        self.login_url = getattr(settings, 'PLATFORM_LOGIN_URL', '')
        self.platform_domain = getattr(settings, 'PLATFORM_DOMAIN', 'localhost')

    def send_email(
        self,
        to_email: str,
        subject: str,
        message: str
    ) -> bool:
        """
        Send one email

        Returns:
            True if sent successfully, False otherwise
        """

        if self.use_mock:
            return self._mock_send_email(to_email, subject, message)

        try:
            send_platform_email(subject, message, [to_email])
        except Exception as e:
            logger.error(f'Email send error to {to_email}: {str(e)}')
            return False

        logger.info(f'Email sent to {to_email}: {subject}')
        return True

    # ==========================================
    # MERCHANT EMAILS
    # ==========================================

    def send_merchant_welcome(
        self,
        email: str,
        name: str,
        website_name: str,
        subdomain: str,
        temp_password: str
    ) -> bool:
        """Login details for a newly provisioned merchant admin"""
        subject = f'Welcome to Growth Small Beez - {website_name}'
        message = (
            f'Hello {name},\n\n'
            f'Your store "{website_name}" has been created.\n\n'
            f'Store address: https://{subdomain}.{self.platform_domain}\n'
            f'Login: {self.login_url}\n'
            f'Email: {email}\n'
            f'Temporary password: {temp_password}\n\n'
            f'You will be asked to change this password when you first log in. '
            f'Your store goes live once the platform team activates it.\n'
        )
        return self.send_email(email, subject, message)

    # ==========================================
    # CUSTOMER EMAILS
    # ==========================================

    def send_order_tracking_update(self, order) -> bool:
        """Tell the customer their order moved to a new tracking status"""
        status_label = order.get_tracking_status_display()
        subject = f'Order {order.order_reference}: {status_label}'
        lines = [
            f'Hello {order.customer_name},',
            '',
            f'Your order {order.order_reference} from {order.merchant.website_name} '
            f'is now: {status_label}.',
            f'Order total: {format_currency(order.total_amount)}',
        ]
        if order.verification_code:
            lines.append(f'Delivery verification code: {order.verification_code}')
        return self.send_email(order.customer_email, subject, '\n'.join(lines) + '\n')

    def _mock_send_email(self, to_email: str, subject: str, message: str) -> bool:
        """Mock email sending for development and tests"""
        logger.info(f'[MOCK EMAIL] To: {to_email} | Subject: {subject}')
        logger.debug(f'[MOCK EMAIL] Message: {message[:100]}...')
        return True
