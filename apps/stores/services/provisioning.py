"""
Merchant provisioning: login account, Paystack payout sub-account and
merchant profile, created as one saga so a failure part-way through
does not leave an orphaned login behind.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from django.db import IntegrityError, transaction

from apps.users.identity import IdentityError, IdentityProvider
from apps.users.models import CustomUser
from ..models import Merchant
from .config import PlatformConfig
from .exceptions import ConflictError, GatewayError, NotFoundError, ValidationError
from .notifications import EmailService
from .paystack import PaystackService
from .saga import Saga
from .schemas import MerchantRequest
from .utils import mask_sensitive_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionedMerchant:
    merchant_id: str
    user_id: int
    email: str
    subdomain: str
    slug: str
    paystack_subaccount_code: Optional[str]
    temp_password: Optional[str]

    def as_dict(self) -> Dict:
        return asdict(self)


class MerchantProvisioningService:

    def __init__(
        self,
        config: PlatformConfig,
        gateway: Optional[PaystackService] = None,
        identity: Optional[IdentityProvider] = None,
        notifications: Optional[EmailService] = None
    ):
        self.config = config
        self.db = config.catalog_connection
        self.gateway = gateway or PaystackService(config)
        self.identity = identity or IdentityProvider(using=self.db)
        self.notifications = notifications or EmailService()

    def create_merchant(self, request: MerchantRequest) -> ProvisionedMerchant:
        """
        Provision a merchant admin.

        Steps, each undone in reverse if a later one fails:
            account     login with role admin (deleted on rollback)
            subaccount  supplied code, or a new Paystack sub-account when
                        bank details are complete, or none
            profile     Merchant row, inactive until a superadmin activates it

        Raises:
            ValidationError: missing or malformed fields
            ConflictError: email, subdomain or slug already taken
            GatewayError: Paystack refused the sub-account
        """
        request.validate()
        self._check_conflicts(request)

        saga = Saga('create-merchant')
        saga.step('account', lambda results: self._create_account(request),
                  compensate=lambda account: self.identity.delete_account(account[0]))
        saga.step('subaccount', lambda results: self._resolve_subaccount(request),
                  compensate=self._report_orphaned_subaccount)
        saga.step('profile', lambda results: self._create_profile(
            request, results['account'][0], results['subaccount']))
        results = saga.run()

        user_id, temp_password = results['account']
        merchant = results['profile']
        logger.info(f'Merchant provisioned: {merchant.pk} ({merchant.subdomain}) user={user_id}')

        sent = self.notifications.send_merchant_welcome(
            email=merchant.email,
            name=merchant.name,
            website_name=merchant.website_name,
            subdomain=merchant.subdomain,
            temp_password=temp_password,
        )
        if not sent:
            logger.warning(f'Welcome email not delivered to {merchant.email}')

        return ProvisionedMerchant(
            merchant_id=str(merchant.pk),
            user_id=user_id,
            email=merchant.email,
            subdomain=merchant.subdomain,
            slug=merchant.slug,
            paystack_subaccount_code=merchant.paystack_subaccount_code,
            temp_password=None if request.password else temp_password,
        )

    def set_merchant_status(
        self,
        merchant_id,
        is_active: Optional[bool] = None,
        payment_status: Optional[str] = None
    ) -> Merchant:
        """Superadmin activation and billing status"""
        if is_active is None and not payment_status:
            raise ValidationError('Provide is_active or payment_status')

        merchant = Merchant.objects.using(self.db).filter(pk=merchant_id).first()
        if merchant is None:
            raise NotFoundError('Merchant not found')

        update_fields = ['updated_at']
        if is_active is not None:
            merchant.is_active = is_active
            update_fields.append('is_active')
        if payment_status:
            if payment_status not in dict(Merchant.PAYMENT_STATUS_CHOICES):
                raise ValidationError(f'Invalid payment_status: {payment_status}')
            merchant.payment_status = payment_status
            update_fields.append('payment_status')

        merchant.save(using=self.db, update_fields=update_fields)
        logger.info(
            f'Merchant {merchant.pk} status updated: '
            f'is_active={merchant.is_active} payment_status={merchant.payment_status}'
        )
        return merchant

    # ==========================================
    # SAGA STEPS
    # ==========================================

    def _check_conflicts(self, request: MerchantRequest) -> None:
        merchants = Merchant.objects.using(self.db)

        if self.identity.email_exists(request.email) or merchants.filter(email__iexact=request.email).exists():
            raise ConflictError('Email already exists')
        if merchants.filter(subdomain=request.subdomain).exists():
            raise ConflictError('Subdomain already taken')
        if request.slug and merchants.filter(slug=request.slug).exists():
            raise ConflictError('Slug already taken')

    def _create_account(self, request: MerchantRequest):
        try:
            return self.identity.create_account(
                email=request.email,
                password=request.password or None,
                role=CustomUser.ROLE_ADMIN,
                metadata={'name': request.name, 'phone': request.phone},
            )
        except IdentityError as e:
            raise ConflictError(str(e)) from e

    def _resolve_subaccount(self, request: MerchantRequest) -> Optional[str]:
        if request.paystack_subaccount_code:
            return request.paystack_subaccount_code

        if not request.bank.is_complete:
            logger.info(f'No bank details for {request.email}, skipping sub-account')
            return None

        logger.info(
            f'Creating sub-account for {request.website_name} '
            f'({request.bank.bank_name} {mask_sensitive_info(request.bank.account_number)})'
        )
        success, data = self.gateway.create_subaccount(
            business_name=request.website_name,
            bank_code=request.bank.bank_code,
            account_number=request.bank.account_number,
            account_name=request.bank.account_name,
            percentage_charge=self.config.subaccount_percentage_charge,
        )
        if not success:
            raise GatewayError(data.get('error') or 'Paystack error: sub-account creation failed')

        return data['subaccount_code']

    def _report_orphaned_subaccount(self, subaccount_code: Optional[str]) -> None:
        # Paystack has no delete endpoint for sub-accounts
        if subaccount_code:
            logger.warning(f'Sub-account {subaccount_code} left unattached after failed provisioning')

    def _create_profile(self, request: MerchantRequest, user_id, subaccount_code: Optional[str]) -> Merchant:
        try:
            with transaction.atomic(using=self.db):
                return Merchant.objects.using(self.db).create(
                    user_id=user_id,
                    name=request.name,
                    website_name=request.website_name or request.name,
                    email=request.email.lower(),
                    phone=request.phone,
                    subdomain=request.subdomain,
                    slug=request.slug or request.subdomain,
                    location=request.location,
                    referral_code=request.referral_code,
                    nin=request.nin,
                    account_name=request.bank.account_name,
                    account_number=request.bank.account_number,
                    bank_name=request.bank.bank_name,
                    bank_code=request.bank.bank_code,
                    paystack_subaccount_code=subaccount_code,
                    primary_color=request.primary_color or Merchant.DEFAULT_PRIMARY_COLOR,
                    is_active=False,
                    payment_status=Merchant.PAYMENT_STATUS_PENDING,
                )
        except IntegrityError as e:
            raise ConflictError(f'Failed to create merchant profile: {e}') from e
