"""Utility modules for ishtar_tierlist."""

from ishtar_tierlist.utils.role_normalizer import ROLE_ALIASES, normalize_role

__all__ = [
    "ROLE_ALIASES",
    "normalize_role",
]
