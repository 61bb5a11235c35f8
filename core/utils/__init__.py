"""
Utility modules for core functionality.

Modules:
- decorators: Utility decorators (timer)
- enum_converter: Enum parsing and conversion
"""

from .decorators import timer
from .enum_converter import enum_to_string, parse_enum

__all__ = [
    "timer",
    "enum_to_string",
    "parse_enum",
]
