from django.contrib.auth import get_user_model
from django.urls import reverse

User = get_user_model()

DATABASE_GATEWAY = 'apps.gateway.backends.database.DatabaseGateway'


class SignedInMixin:
    """
    Sign a staff account in through the login view

    Use with @override_settings(CRM_GATEWAY_BACKEND=DATABASE_GATEWAY).
    """

    email = 'amit@example.com'
    password = 'testpass123'

    def create_staff_user(self):
        return User.objects.create_user(
            username='amit',
            email=self.email,
            password=self.password
        )

    def sign_in(self):
        self.user = self.create_staff_user()
        response = self.client.post(reverse('accounts:login'), {
            'email': self.email,
            'password': self.password,
        })
        self.assertEqual(response.status_code, 302)
        return response
