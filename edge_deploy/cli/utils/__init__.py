"""CLI utility functions"""

from .output import console, format_task_result, format_rewrite_report, print_error

__all__ = [
    'console',
    'format_task_result',
    'format_rewrite_report',
    'print_error',
]
