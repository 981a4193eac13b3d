"""
Boundary layer between the pool engine and the message-dispatch host.
"""

from .operations import parse_opcode, parse_request

__all__ = ["parse_opcode", "parse_request"]
