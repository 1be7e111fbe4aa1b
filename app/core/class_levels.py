"""
Class level utilities
Levels: KG 1 (0), KG 2 (1), Basic 1 (2) ... Basic 9 (10)
"""

from typing import Optional

LEVEL_NAMES = [
    "KG 1",
    "KG 2",
    "Basic 1",
    "Basic 2",
    "Basic 3",
    "Basic 4",
    "Basic 5",
    "Basic 6",
    "Basic 7",
    "Basic 8",
    "Basic 9",
]

LEVEL_MAP = {name: level for level, name in enumerate(LEVEL_NAMES)}

LOWEST_LEVEL = 0
HIGHEST_LEVEL = len(LEVEL_NAMES) - 1

LEVEL_CATEGORIES = ["KG", "Lower Primary", "Upper Primary", "JHS"]


def level_name(level: int) -> str:
    if LOWEST_LEVEL <= level <= HIGHEST_LEVEL:
        return LEVEL_NAMES[level]
    return "Unknown"


def level_number(name: str) -> int:
    return LEVEL_MAP.get(name, LOWEST_LEVEL)


def is_highest_level(level: int) -> bool:
    return level == HIGHEST_LEVEL


def next_level(level: int) -> Optional[int]:
    if level >= HIGHEST_LEVEL:
        return None
    return level + 1


def next_level_name(level: int) -> Optional[str]:
    nxt = next_level(level)
    return level_name(nxt) if nxt is not None else None


def level_category(level: int) -> str:
    if level <= 1:
        return "KG"
    if level <= 4:
        return "Lower Primary"
    if level <= 7:
        return "Upper Primary"
    return "JHS"
