# Trace Package
from .parser import TraceParser, BranchTrace, TraceInfo, create_sample_trace
from .formats import (
    TraceFormat,
    SimpleTextFormat,
    BranchRecord,
    TraceFormatError,
)

__all__ = [
    'TraceParser',
    'BranchTrace',
    'TraceInfo',
    'create_sample_trace',
    'TraceFormat',
    'SimpleTextFormat',
    'BranchRecord',
    'TraceFormatError',
]
