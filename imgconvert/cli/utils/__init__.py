"""
CLI Utilities Module
"""

from .errors import ErrorHandler

__all__ = ["ErrorHandler"]
