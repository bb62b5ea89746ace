"""
Utility modules for the self-test runner.
"""

from .logging_config import setup_logging, env_flag

__all__ = [
    "setup_logging",
    "env_flag",
]
