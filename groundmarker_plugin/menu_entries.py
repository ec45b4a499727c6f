"""Labels and parsing for the per-group mark/unmark menu options.

The host builds the actual context menu; this module only decides which
options to offer for a tile and maps a clicked option back to its group.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .points import GROUP_MAX, GROUP_MIN

MARK = "Mark tile"
UNMARK = "Unmark tile"
WALK_HERE = "Walk here"

_TAG_PATTERN = re.compile(r"<[^>]*>")
_GROUP_PATTERN = re.compile(r".*ark tile \(Group (\d)\)")


@dataclass(frozen=True)
class MenuOption:
    label: str
    group: int
    unmark: bool
    color: Optional[str] = None
    target: str = ""


def remove_tags(text: str) -> str:
    return _TAG_PATTERN.sub("", text or "")


def option_label(group: int, unmark: bool) -> str:
    label = UNMARK if unmark else MARK
    if group == GROUP_MIN:
        return label
    return f"{label} (Group {group})"


def build_menu_options(
    current_group: Optional[int],
    colors: Optional[Mapping[int, str]] = None,
    target: str = "",
) -> list[MenuOption]:
    """Return one option per group, highest group first."""

    options: list[MenuOption] = []
    for group in range(GROUP_MAX, GROUP_MIN - 1, -1):
        unmark = current_group == group
        options.append(
            MenuOption(
                label=option_label(group, unmark),
                group=group,
                unmark=unmark,
                color=(colors or {}).get(group),
                target=target,
            )
        )
    return options


def is_trigger_option(option: str) -> bool:
    return remove_tags(option).strip() == WALK_HERE


def parse_menu_option(option: str) -> Optional[int]:
    """Return the group a clicked option refers to, or ``None`` if it is not ours."""

    text = remove_tags(option).strip()
    if MARK not in text and UNMARK not in text:
        return None
    match = _GROUP_PATTERN.match(text)
    if match is None:
        return GROUP_MIN
    group = int(match.group(1))
    if not GROUP_MIN <= group <= GROUP_MAX:
        return None
    return group
