import logging

from django.dispatch import receiver
from allauth.account.signals import user_signed_up

from .models import CustomUser

logger = logging.getLogger(__name__)


@receiver(user_signed_up)
def assign_customer_role_on_signup(request, user, **kwargs):
    """Self-service signups are always customers.

    Merchant admins are provisioned by a superadmin and never come
    through the public signup form.
    """
    if user.role != CustomUser.ROLE_CUSTOMER:
        user.role = CustomUser.ROLE_CUSTOMER
        user.save(update_fields=['role'])

    logger.info(f"Assigned role '{user.role}' to user {user.email}")
