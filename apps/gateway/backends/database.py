"""
Gateway backend over the project's own database.

Rows live in the `customers` / `enquiries` tables (apps.gateway.models) and
staff accounts are django.contrib.auth users signed in by email + password.
Access and refresh tokens are signed with the project SECRET_KEY.
"""

import datetime
import logging
import uuid
from typing import Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from ..base import CUSTOMERS, ENQUIRIES, BackendSession, BaseGateway
from ..exceptions import AuthError, BackendError, NotFoundError
from ..models import Customer, Enquiry

logger = logging.getLogger(__name__)

ACCESS_SALT = 'apps.gateway.access'
REFRESH_SALT = 'apps.gateway.refresh'


def _serialize(value):
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


class DatabaseGateway(BaseGateway):

    MODELS = {
        CUSTOMERS: Customer,
        ENQUIRIES: Enquiry,
    }

    def _to_row(self, instance) -> Dict:
        return {
            field.attname: _serialize(getattr(instance, field.attname))
            for field in instance._meta.concrete_fields
        }

    def _lookup(self, table, pk):
        model = self.MODELS[table]
        try:
            return model.objects.get(pk=pk)
        except (model.DoesNotExist, ValidationError, ValueError):
            raise NotFoundError(table, pk)

    # ROWS

    def _select(self, table, filters, order_by, descending):
        try:
            queryset = self.MODELS[table].objects.filter(**filters)
            if order_by:
                queryset = queryset.order_by(f"{'-' if descending else ''}{order_by}")
            return [self._to_row(instance) for instance in queryset]
        except (ValidationError, ValueError):
            # malformed filter value (e.g. a non-UUID id) matches nothing
            return []
        except DatabaseError as e:
            logger.error(f"Select on {table} failed: {e}")
            raise BackendError(str(e))

    def _get(self, table, pk):
        try:
            return self._to_row(self._lookup(table, pk))
        except DatabaseError as e:
            logger.error(f"Get on {table} failed: {e}")
            raise BackendError(str(e))

    def _insert(self, table, values):
        instance = self.MODELS[table](**values)
        try:
            instance.full_clean(validate_unique=False)
            instance.save()
        except ValidationError as e:
            raise BackendError(f'Invalid {table} row: {e.message_dict}', status_code=400)
        except DatabaseError as e:
            logger.error(f"Insert into {table} failed: {e}")
            raise BackendError(str(e))
        instance.refresh_from_db()
        return self._to_row(instance)

    def _update(self, table, pk, values):
        instance = self._lookup(table, pk)
        for column, value in values.items():
            setattr(instance, column, value)
        try:
            instance.full_clean(validate_unique=False)
            instance.save()
        except ValidationError as e:
            raise BackendError(f'Invalid {table} row: {e.message_dict}', status_code=400)
        except DatabaseError as e:
            logger.error(f"Update of {table} row {pk} failed: {e}")
            raise BackendError(str(e))
        instance.refresh_from_db()
        return self._to_row(instance)

    def _atomic(self):
        return transaction.atomic()

    def _announce(self, table, action, row):
        # Announce after commit so listeners never see rolled-back rows
        transaction.on_commit(lambda: super(DatabaseGateway, self)._announce(table, action, row))

    # AUTH

    @staticmethod
    def _identity(user) -> Dict:
        return {'id': str(user.pk), 'email': user.email}

    def _issue(self, user) -> BackendSession:
        return BackendSession(
            access_token=signing.dumps({'uid': user.pk}, salt=ACCESS_SALT),
            refresh_token=signing.dumps({'uid': user.pk}, salt=REFRESH_SALT),
            user=self._identity(user),
        )

    def _load_user(self, token, salt, max_age):
        try:
            payload = signing.loads(token, salt=salt, max_age=max_age)
        except signing.SignatureExpired:
            raise AuthError('Session expired', status_code=401)
        except signing.BadSignature:
            raise AuthError('Invalid session token', status_code=401)

        UserModel = get_user_model()
        return UserModel._default_manager.filter(pk=payload.get('uid'), is_active=True).first()

    def sign_in(self, email: str, password: str) -> BackendSession:
        UserModel = get_user_model()
        user = UserModel._default_manager.filter(email__iexact=email.strip()).first()

        if user is None or not user.is_active or not user.check_password(password):
            logger.info(f"Rejected sign-in for {email}")
            raise AuthError('Invalid login credentials', status_code=400)

        return self._issue(user)

    def sign_out(self, session: BackendSession) -> None:
        # Tokens are stateless; dropping them from the Django session is enough
        logger.debug(f"Signed out {session.user.get('email', '')}")

    def get_user(self, session: BackendSession) -> Optional[Dict]:
        user = self._load_user(session.access_token, ACCESS_SALT, settings.CRM_ACCESS_TOKEN_AGE)
        return self._identity(user) if user else None

    def refresh(self, session: BackendSession) -> BackendSession:
        if not session.refresh_token:
            raise AuthError('Session expired', status_code=401)
        user = self._load_user(session.refresh_token, REFRESH_SALT, settings.CRM_REFRESH_TOKEN_AGE)
        if user is None:
            raise AuthError('Session expired', status_code=401)
        return self._issue(user)
