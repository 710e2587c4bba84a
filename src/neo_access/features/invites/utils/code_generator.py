"""Invite code generation."""

import secrets
from typing import Optional

# No I, O, 0 or 1: codes are read aloud and typed by hand.
UNAMBIGUOUS_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class InviteCodeGenerator:
    """Draws codes from a fixed alphabet using ``secrets``."""

    def __init__(self, alphabet: str = UNAMBIGUOUS_ALPHABET, length: int = 8):
        if length < 1:
            raise ValueError("length must be positive")
        if len(set(alphabet)) != len(alphabet) or len(alphabet) < 2:
            raise ValueError("alphabet must hold at least two distinct characters")
        self.alphabet = alphabet
        self.length = length

    def __call__(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def is_well_formed(self, code: Optional[str]) -> bool:
        """Check length and alphabet without touching the store."""
        return bool(code) and len(code) == self.length and all(c in self.alphabet for c in code)


def normalize_code(code: Optional[str]) -> str:
    """Canonical form of a user-typed code."""
    return (code or "").strip().upper()
