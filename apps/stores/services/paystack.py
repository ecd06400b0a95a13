"""
Paystack API Integration Service
Handles split-payment initialization and merchant sub-accounts
Documentation: https://paystack.com/docs/api/

Configured through PlatformConfig:
- gateway_api_key (PAYSTACK_SECRET_KEY)
- gateway_base_url (PAYSTACK_BASE_URL)
- use_mock_gateway (USE_MOCK_PAYSTACK, for development without real API)
"""

import requests
import logging
from typing import Dict, List, Optional, Tuple
from decimal import Decimal

from .config import PlatformConfig
from .exceptions import GatewayError
from .utils import to_minor_units

logger = logging.getLogger(__name__)


class PaystackAPIError(GatewayError):
    """Paystack answered with status false, or could not be reached"""
    pass


class PaystackService:
    """
    Service class for interacting with Paystack API
    Handles transaction initialization (with optional split) and sub-accounts
    """

    TIMEOUT = 30

    def __init__(self, config: PlatformConfig):
        self.secret_key = config.gateway_api_key
        self.base_url = config.gateway_base_url
        self.currency = config.currency
        self.use_mock = config.use_mock_gateway

        if not self.use_mock and not self.secret_key:
            logger.warning('Paystack API key not configured. Gateway calls will fail.')

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests"""
        return {
            'Authorization': f'Bearer {self.secret_key}',
            'Content-Type': 'application/json',
        }

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None
    ) -> Dict:
        """
        Make HTTP request to Paystack API

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint
            data: Request payload

        Returns:
            Response data as dictionary

        Raises:
            PaystackAPIError: If the request fails or Paystack reports
                status false (its message is kept verbatim)
        """
        if not self.secret_key:
            logger.error(f'Paystack secret key not configured: {endpoint}')
            raise PaystackAPIError('Paystack secret key not configured')

        url = f"{self.base_url}{endpoint}"

        try:
            if method.upper() == 'GET':
                response = requests.get(url, headers=self._get_headers(), params=data, timeout=self.TIMEOUT)
            else:
                response = requests.post(url, headers=self._get_headers(), json=data, timeout=self.TIMEOUT)

        except requests.exceptions.Timeout:
            logger.error(f'Paystack API timeout: {endpoint}')
            raise PaystackAPIError('Request timeout. Please try again.')

        except requests.exceptions.RequestException as e:
            logger.error(f'Paystack API error: {str(e)}')
            raise PaystackAPIError(f'API Error: {str(e)}')

        try:
            result = response.json()
        except ValueError:
            logger.error(f'Paystack returned non-JSON body: {endpoint} (HTTP {response.status_code})')
            raise PaystackAPIError(f'API Error: unexpected response (HTTP {response.status_code})')

        # Paystack always returns status field
        if not result.get('status'):
            error_msg = result.get('message', 'Unknown error')
            logger.error(f'Paystack rejected {endpoint}: {error_msg}')
            raise PaystackAPIError(error_msg)

        return result

    # ==========================================
    # PAYMENT INITIALIZATION
    # ==========================================

    def build_flat_split(self, subaccount_code: str, share: Decimal) -> Dict:
        """
        Flat split: the sub-account gets `share` (Naira), the rest of the
        charge stays with the platform's main account.
        """
        subaccounts: List[Dict] = [
            {
                'subaccount': subaccount_code,
                'share': to_minor_units(share),
            }
        ]
        return {
            'type': 'flat',
            'currency': self.currency,
            'subaccounts': subaccounts,
            'bearer_type': 'account',
        }

    def initialize_payment(
        self,
        email: str,
        amount: Decimal,
        reference: str,
        callback_url: Optional[str] = None,
        webhook_url: Optional[str] = None,
        metadata: Optional[Dict] = None,
        split: Optional[Dict] = None
    ) -> Tuple[bool, Dict]:
        """
        Initialize a payment transaction
        Customer will be redirected to Paystack payment page

        Args:
            email: Customer email
            amount: Amount in Naira
            reference: Unique transaction reference
            callback_url: URL to redirect after payment
            webhook_url: URL Paystack notifies on settlement
            metadata: Additional data (order_id, admin_id, etc.)
            split: Split configuration from build_flat_split(), or None
                to keep the whole charge on the main account

        Returns:
            Tuple of (success: bool, data: dict)

        Example response:
            {
                'authorization_url': 'https://checkout.paystack.com/...',
                'access_code': 'access_code_here',
                'reference': 'GSB-1718000000000-K3M9P2'
            }
        """

        if self.use_mock:
            return self._mock_initialize_payment(email, amount, reference)

        payload = {
            'email': email,
            'amount': to_minor_units(amount),
            'reference': reference,
        }

        if callback_url:
            payload['callback_url'] = callback_url

        if webhook_url:
            payload['webhook_url'] = webhook_url

        if metadata:
            payload['metadata'] = metadata

        if split:
            payload['split'] = split

        try:
            response = self._make_request('POST', '/transaction/initialize', data=payload)
        except PaystackAPIError as e:
            logger.error(f'Payment initialization error: {e.message}')
            return False, {'error': e.message}

        data = response.get('data') or {}
        logger.info(f'Payment initialized: {reference}')

        return True, {
            'authorization_url': data.get('authorization_url'),
            'access_code': data.get('access_code'),
            'reference': data.get('reference') or reference
        }

    # ==========================================
    # SUB-ACCOUNTS (Merchant payout destinations)
    # ==========================================

    def create_subaccount(
        self,
        business_name: str,
        bank_code: str,
        account_number: str,
        account_name: str,
        percentage_charge: Decimal
    ) -> Tuple[bool, Dict]:
        """
        Register a merchant's bank account as a Paystack sub-account

        Args:
            business_name: Store display name
            bank_code: Bank code (e.g., '058' for GTBank)
            account_number: Bank account number
            account_name: Account holder name
            percentage_charge: Platform percentage on split payments

        Returns:
            Tuple of (success: bool, data: dict)

        Example response:
            {
                'subaccount_code': 'ACCT_xxx',
                'business_name': 'Bee Fashion',
            }
        """

        if self.use_mock:
            return self._mock_create_subaccount(business_name, account_number)

        try:
            response = self._make_request(
                'POST',
                '/subaccount',
                data={
                    'business_name': business_name,
                    'bank_code': bank_code,
                    'account_number': account_number,
                    'account_name': account_name,
                    'percentage_charge': float(percentage_charge),
                }
            )
        except PaystackAPIError as e:
            logger.error(f'Create sub-account error: {e.message}')
            return False, {'error': f'Paystack error: {e.message}'}

        data = response.get('data') or {}
        logger.info(f'Sub-account created: {data.get("subaccount_code")}')

        return True, {
            'subaccount_code': data.get('subaccount_code'),
            'business_name': data.get('business_name', business_name),
        }

    # ==========================================
    # MOCK METHODS (FOR DEVELOPMENT)
    # ==========================================

    def _mock_initialize_payment(self, email: str, amount: Decimal, reference: str) -> Tuple[bool, Dict]:
        """Mock payment initialization"""
        logger.info(f'[MOCK] Payment initialized: ₦{amount} for {email}')

        return True, {
            'authorization_url': f'https://mock-paystack.com/pay/{reference}',
            'access_code': f'mock_access_{reference}',
            'reference': reference,
            'mock': True
        }

    def _mock_create_subaccount(self, business_name: str, account_number: str) -> Tuple[bool, Dict]:
        """Mock sub-account creation"""
        logger.info(f'[MOCK] Sub-account created: {business_name} - {account_number[-4:]}')

        return True, {
            'subaccount_code': f'ACCT_mock_{account_number[-4:]}',
            'business_name': business_name,
            'mock': True
        }
