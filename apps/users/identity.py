"""
Identity provider used by merchant provisioning.

Wraps the custom user model behind the two calls provisioning needs:
create an account with metadata, and delete it again as a compensation.
"""

import logging
import secrets
import string
from typing import Dict, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Raised when the identity store refuses to create an account"""
    pass


def generate_temp_password(length: int = 8) -> str:
    """Uppercase alphanumeric temporary password"""
    chars = string.ascii_uppercase + string.digits
    return ''.join(secrets.choice(chars) for _ in range(length))


class IdentityProvider:

    def __init__(self, using: str = 'default'):
        self.using = using

    @property
    def user_model(self):
        return get_user_model()

    def email_exists(self, email: str) -> bool:
        return self.user_model.objects.using(self.using).filter(email__iexact=email).exists()

    def create_account(
        self,
        email: str,
        password: Optional[str],
        role: str,
        metadata: Optional[Dict] = None
    ):
        """
        Create a login account and return its id.

        `metadata` may carry `name` and `phone`; other keys are ignored.
        Accounts created without a password get a temporary one and must
        reset it on first login.
        """
        metadata = metadata or {}
        temp_password = password or generate_temp_password()

        try:
            with transaction.atomic(using=self.using):
                user = self.user_model.objects.db_manager(self.using).create_user(
                    email=email,
                    password=temp_password,
                    role=role,
                    name=metadata.get('name', ''),
                    phone=metadata.get('phone', ''),
                    must_reset_password=not password,
                )
        except IntegrityError as e:
            raise IdentityError(f'Failed to create authentication user: {e}') from e

        logger.info(f'Identity account created: {user.pk} ({role})')
        return user.pk, temp_password

    def delete_account(self, user_id) -> None:
        deleted, _ = self.user_model.objects.using(self.using).filter(pk=user_id).delete()
        logger.warning(f'Identity account {user_id} deleted (rows={deleted})')
