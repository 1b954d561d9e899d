# Components Package
from .history import GlobalHistoryRegister
from .tables import SaturatingCounterTable, IndexingScheme

__all__ = [
    'GlobalHistoryRegister',
    'SaturatingCounterTable',
    'IndexingScheme'
]
