"""CLI utility functions"""

from .output import console, format_pending_table, format_batch_result

__all__ = [
    'console',
    'format_pending_table',
    'format_batch_result',
]
