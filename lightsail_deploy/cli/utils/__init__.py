"""CLI utility functions"""

from .interactive import SetupWizard
from .output import (
    console,
    format_setup_result,
    format_types_table,
    print_error,
    print_exception,
    print_info,
    print_success,
    print_validation_result,
    print_warning,
)

__all__ = [
    # Interactive utilities
    'SetupWizard',

    # Output utilities
    'console',
    'format_setup_result',
    'format_types_table',
    'print_error',
    'print_exception',
    'print_info',
    'print_success',
    'print_validation_result',
    'print_warning',
]
