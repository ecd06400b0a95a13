from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings


@dataclass(frozen=True)
class PlatformConfig:
    """Settings the checkout, payment and provisioning services need.

    Built once from Django settings and handed to each service, so
    tests can pass their own values.
    """
    gateway_api_key: str
    catalog_connection: str = 'default'
    callback_base_url: str = 'http://localhost:8000'
    webhook_base_url: str = 'http://localhost:8000'
    gateway_base_url: str = 'https://api.paystack.co'
    use_mock_gateway: bool = False
    currency: str = 'NGN'
    reference_prefix: str = 'GSB'
    subaccount_percentage_charge: Decimal = Decimal('1.5')

    @classmethod
    def from_settings(cls) -> 'PlatformConfig':
        return cls(
            gateway_api_key=settings.PAYSTACK_SECRET_KEY,
            catalog_connection=settings.CATALOG_DATABASE,
            callback_base_url=settings.PAYMENT_CALLBACK_BASE_URL.rstrip('/'),
            webhook_base_url=settings.PAYMENT_WEBHOOK_BASE_URL.rstrip('/'),
            gateway_base_url=settings.PAYSTACK_BASE_URL.rstrip('/'),
            use_mock_gateway=settings.USE_MOCK_PAYSTACK,
            currency=settings.PAYMENT_CURRENCY,
            reference_prefix=settings.ORDER_REFERENCE_PREFIX,
            subaccount_percentage_charge=Decimal(str(settings.SUBACCOUNT_PERCENTAGE_CHARGE)),
        )

    @property
    def webhook_url(self) -> str:
        return f'{self.webhook_base_url}/api/payments/webhook/'

    def callback_url(self, reference: str) -> str:
        return f'{self.callback_base_url}/payment-success?reference={reference}'
