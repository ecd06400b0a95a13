from django.test import RequestFactory, TestCase
from allauth.account.signals import user_signed_up

from apps.users.identity import IdentityError, IdentityProvider, generate_temp_password
from apps.users.models import CustomUser


class IdentityProviderTests(TestCase):

    def setUp(self):
        self.identity = IdentityProvider()

    def test_create_with_temporary_password(self):
        user_id, password = self.identity.create_account(
            'ada@example.com', None, CustomUser.ROLE_ADMIN, {'name': 'Ada Obi', 'phone': '0801'}
        )

        user = CustomUser.objects.get(pk=user_id)
        self.assertEqual(user.role, CustomUser.ROLE_ADMIN)
        self.assertEqual(user.name, 'Ada Obi')
        self.assertTrue(user.must_reset_password)
        self.assertTrue(user.check_password(password))

    def test_duplicate_email_raises(self):
        self.identity.create_account('ada@example.com', 'pass12345', CustomUser.ROLE_ADMIN)

        with self.assertRaises(IdentityError):
            self.identity.create_account('ada@example.com', 'pass12345', CustomUser.ROLE_ADMIN)

    def test_email_exists_ignores_case(self):
        self.identity.create_account('ada@example.com', 'pass12345', CustomUser.ROLE_ADMIN)

        self.assertTrue(self.identity.email_exists('ADA@example.com'))
        self.assertFalse(self.identity.email_exists('bola@example.com'))

    def test_delete_account(self):
        user_id, _ = self.identity.create_account('ada@example.com', 'pass12345', CustomUser.ROLE_ADMIN)

        self.identity.delete_account(user_id)

        self.assertFalse(CustomUser.objects.filter(pk=user_id).exists())

    def test_temp_password_shape(self):
        password = generate_temp_password()

        self.assertEqual(len(password), 8)
        self.assertTrue(password.isalnum())
        self.assertEqual(password, password.upper())


class SignupRoleTests(TestCase):

    def test_signup_forces_customer_role(self):
        user = CustomUser.objects.create_user('new@example.com', 'pass12345', role=CustomUser.ROLE_ADMIN)

        user_signed_up.send(sender=CustomUser, request=RequestFactory().get('/'), user=user)

        user.refresh_from_db()
        self.assertEqual(user.role, CustomUser.ROLE_CUSTOMER)

    def test_superuser_role(self):
        user = CustomUser.objects.create_superuser('root@example.com', 'pass12345')

        self.assertTrue(user.is_superadmin)
        self.assertTrue(user.is_staff)
