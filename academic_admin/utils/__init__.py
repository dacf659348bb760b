"""
Utility modules for the academic administration app.

- constants: curriculum constants and the default curriculum
- helpers: small formatting helpers shared by routes and CLI commands
"""

from academic_admin.utils.constants import DEFAULT_CURRICULUM
from academic_admin.utils.helpers import format_utc_iso, local_today

__all__ = [
    'DEFAULT_CURRICULUM',
    'format_utc_iso',
    'local_today',
]
