# Common utilities and shared modules
"""
Shared components:
- Project configuration
- Logging configuration
"""

from .config import settings, PROJECT_ROOT, Settings
from .logging import setup_logging

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "Settings",
    "setup_logging",
]
