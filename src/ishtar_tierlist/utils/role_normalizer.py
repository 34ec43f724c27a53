"""Centralized role normalization utility.

Roster data spells roles in many ways ("top", "Solo", "jg", "bot", ...).
Everything is mapped onto the five tier list columns here.
"""

from typing import Optional

from ishtar_tierlist.models.ranking import RoleColumn

# Mapping from any known role spelling (lowercased) to its column
ROLE_ALIASES: dict[str, RoleColumn] = {
    # Solo lane variations
    "solo": RoleColumn.SOLO,
    "top": RoleColumn.SOLO,
    "top laner": RoleColumn.SOLO,
    "toplane": RoleColumn.SOLO,

    # Jungle variations
    "jungle": RoleColumn.JUNGLE,
    "jungler": RoleColumn.JUNGLE,
    "jng": RoleColumn.JUNGLE,
    "jg": RoleColumn.JUNGLE,

    # Mid lane variations
    "mid": RoleColumn.MID,
    "middle": RoleColumn.MID,
    "mid laner": RoleColumn.MID,
    "midlane": RoleColumn.MID,

    # Support variations
    "support": RoleColumn.SUPPORT,
    "supp": RoleColumn.SUPPORT,
    "sup": RoleColumn.SUPPORT,

    # Carry variations
    "adc": RoleColumn.ADC,
    "bot": RoleColumn.ADC,
    "bottom": RoleColumn.ADC,
    "ad carry": RoleColumn.ADC,
    "carry": RoleColumn.ADC,
    "marksman": RoleColumn.ADC,
}


def normalize_role(role: Optional[str]) -> Optional[RoleColumn]:
    """Normalize a role string to its tier list column.

    Args:
        role: Role string in any known format (e.g., "jg", "Solo", "bot")

    Returns:
        Matching RoleColumn, or None if the role is missing or unknown

    Examples:
        >>> normalize_role("jg")
        <RoleColumn.JUNGLE: 'JUNGLE'>
        >>> normalize_role("top")
        <RoleColumn.SOLO: 'SOLO'>
        >>> normalize_role(None)
    """
    if role is None:
        return None
    return ROLE_ALIASES.get(role.strip().lower())
