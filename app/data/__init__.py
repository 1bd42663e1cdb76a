"""Statement decoding, normalization, and the user-scoped record store."""
from .loader import read_statement, is_supported
from .store import DataStore
from .schemas import Account, Category, DateWindow, Transaction, TransactionKind
from .normalize import normalize, normalize_with_report, NormalizeReport
