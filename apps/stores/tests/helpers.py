"""
Shared fixtures for the stores tests
"""

import io
from decimal import Decimal
from unittest import mock

from PIL import Image

from apps.stores.models import Merchant, Product
from apps.stores.services.config import PlatformConfig
from apps.users.models import CustomUser


def make_config(**overrides):
    values = {
        'gateway_api_key': 'sk_test_123',
        'callback_base_url': 'https://shop.example.com',
        'webhook_base_url': 'https://api.example.com',
        'use_mock_gateway': False,
    }
    values.update(overrides)
    return PlatformConfig(**values)


def make_user(email, role=CustomUser.ROLE_CUSTOMER, password='pass12345'):
    return CustomUser.objects.create_user(email=email, password=password, role=role)


def make_merchant(subdomain='beefashion', **fields):
    user = make_user(f'{subdomain}@example.com', role=CustomUser.ROLE_ADMIN)
    values = {
        'user': user,
        'name': 'Ada Obi',
        'website_name': 'Bee Fashion',
        'email': f'{subdomain}@example.com',
        'phone': '08012345678',
        'subdomain': subdomain,
        'nin': '12345678901',
        'is_active': True,
    }
    values.update(fields)
    return Merchant.objects.create(**values)


def make_product(merchant, price='1500.00', original_price='1000.00', **fields):
    values = {
        'merchant': merchant,
        'name': 'Ankara Gown',
        'category': Product.CATEGORY_FASHION,
        'description': 'Hand-sewn',
        'price': Decimal(price),
        'original_price': Decimal(original_price),
        'units_available': 5,
        'location_state': 'Lagos',
        'location_address': '12 Allen Avenue',
        'lga': 'Ikeja',
        'attributes': {'size': 'M', 'color': 'Blue'},
    }
    values.update(fields)
    return Product.objects.create(**values)


def paystack_response(payload, status_code=200):
    """A fake requests.Response carrying a Paystack JSON body"""
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def png_bytes(size=(10, 10)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color='green').save(buffer, format='PNG')
    return buffer.getvalue()

