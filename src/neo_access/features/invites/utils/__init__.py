"""Invite utilities."""

from .code_generator import InviteCodeGenerator, UNAMBIGUOUS_ALPHABET, normalize_code

__all__ = [
    "InviteCodeGenerator",
    "UNAMBIGUOUS_ALPHABET",
    "normalize_code",
]
