"""
Utils module - Utility functions and helpers.
"""

from fieldvault.utils.validators import ValidationError, is_hex, validate_hex

__all__ = ["ValidationError", "is_hex", "validate_hex"]
