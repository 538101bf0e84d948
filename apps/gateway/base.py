"""
Data access gateway contract.

A gateway is the configured handle to the backend that stores customers and
enquiries and issues backend sessions. Views never talk to the backend
directly: they get a gateway bound to the visitor's session from the
SessionContext and call the row/auth operations below.

Rows are plain dicts of JSON-compatible values (UUIDs and dates as strings),
the shape PostgREST returns.
"""

import copy
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from .signals import row_written

logger = logging.getLogger(__name__)

CUSTOMERS = 'customers'
ENQUIRIES = 'enquiries'
TABLES = (CUSTOMERS, ENQUIRIES)


@dataclass
class BackendSession:
    """Tokens issued by the backend on sign-in, kept in the Django session"""

    access_token: str
    refresh_token: str = ''
    user: Dict = field(default_factory=dict)

    def as_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['BackendSession']:
        if not data or not data.get('access_token'):
            return None
        return cls(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token', ''),
            user=data.get('user') or {},
        )


class BaseGateway(ABC):
    """
    Row and auth operations shared by every backend

    Subclasses implement the underscored row hooks and the auth methods.
    Public row methods validate the table name and announce writes through
    the row_written signal.
    """

    def __init__(self, session: Optional[BackendSession] = None):
        self.session = session
        self._journal = None

    @property
    def is_configured(self) -> bool:
        return True

    def bind(self, session: Optional[BackendSession]) -> 'BaseGateway':
        """Return a gateway acting on behalf of the given backend session"""
        bound = copy.copy(self)
        bound.session = session
        bound._journal = None
        return bound

    # ROW OPERATIONS

    def select(self, table: str, filters: Optional[Dict] = None, order_by: Optional[str] = None,
               descending: bool = False) -> List[Dict]:
        self._check_table(table)
        return self._select(table, filters or {}, order_by, descending)

    def get(self, table: str, pk: str) -> Dict:
        self._check_table(table)
        return self._get(table, str(pk))

    def insert(self, table: str, values: Dict) -> Dict:
        self._check_table(table)
        row = self._insert(table, values)
        self._record(table, 'insert', row)
        return row

    def update(self, table: str, pk: str, values: Dict) -> Dict:
        self._check_table(table)
        row = self._update(table, str(pk), values)
        self._record(table, 'update', row)
        return row

    @contextmanager
    def transaction(self):
        """
        Run a group of writes as one unit

        Yields a gateway to write through. Writes are announced only once the
        block completes; if it raises, the backend undoes them.
        """
        tx = copy.copy(self)
        tx._journal = []
        try:
            with tx._atomic():
                yield tx
        except Exception:
            tx._compensate(list(reversed(tx._journal)))
            raise
        for table, action, row in tx._journal:
            tx._announce(table, action, row)

    def _record(self, table, action, row):
        if self._journal is not None:
            self._journal.append((table, action, row))
        else:
            self._announce(table, action, row)

    def _announce(self, table, action, row):
        row_written.send(sender=self.__class__, table=table, action=action, row=row)

    @staticmethod
    def _check_table(table):
        if table not in TABLES:
            raise ValueError(f'Unknown table: {table}')

    @contextmanager
    def _atomic(self):
        yield

    def _compensate(self, journal):
        """Undo writes recorded inside a failed transaction (newest first)"""
        pass

    @abstractmethod
    def _select(self, table, filters, order_by, descending):
        raise NotImplementedError

    @abstractmethod
    def _get(self, table, pk):
        raise NotImplementedError

    @abstractmethod
    def _insert(self, table, values):
        raise NotImplementedError

    @abstractmethod
    def _update(self, table, pk, values):
        raise NotImplementedError

    # AUTH OPERATIONS

    @abstractmethod
    def sign_in(self, email: str, password: str) -> BackendSession:
        """Password sign-in. Raises AuthError when credentials are rejected."""
        raise NotImplementedError

    @abstractmethod
    def sign_out(self, session: BackendSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_user(self, session: BackendSession) -> Optional[Dict]:
        """Identity for the session. Raises AuthError when the token is stale."""
        raise NotImplementedError

    @abstractmethod
    def refresh(self, session: BackendSession) -> BackendSession:
        raise NotImplementedError
