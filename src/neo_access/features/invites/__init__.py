"""Invites feature.

Single-use onboarding codes issued by administrators under level and quota
limits, redeemed atomically.
"""

from .entities import InviteCheck, InviteCode
from .services import InviteService
from .utils import InviteCodeGenerator, UNAMBIGUOUS_ALPHABET, normalize_code

__all__ = [
    # Entities
    "InviteCheck",
    "InviteCode",

    # Services
    "InviteService",

    # Utils
    "InviteCodeGenerator",
    "UNAMBIGUOUS_ALPHABET",
    "normalize_code",
]
