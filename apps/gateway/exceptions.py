"""
Exceptions raised by the data access gateway.

Views catch BackendError (and its subclasses) to tell backend failures apart
from programming errors.
"""


class BackendError(Exception):
    """A remote call failed (timeout, connection error, non-2xx, database error)"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(BackendError):
    """Credentials or session token rejected by the backend"""
    pass


class NotFoundError(BackendError):
    """Row requested by id does not exist"""

    def __init__(self, table, pk):
        super().__init__(f'{table} row {pk} not found', status_code=404)
        self.table = table
        self.pk = pk
