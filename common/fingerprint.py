"""
Response fingerprint (HTTP entity tag) for schedule answers.

Only updatedOn and both day statuses are part of the tag: two upstream
payloads that agree on these are treated as the same answer source.
"""

from typing import Optional

from .models import GroupSchedule


def make_fingerprint(group: GroupSchedule) -> str:
    parts = (group.updated_on, group.today.status, group.tomorrow.status)
    return '"' + "_".join("" if p is None else str(p) for p in parts) + '"'


def _strip_weak(tag: str) -> str:
    return tag[2:] if tag.startswith("W/") else tag


def fingerprint_matches(if_none_match: Optional[str], fingerprint: str) -> bool:
    """
    Checks an If-None-Match header value against our fingerprint.
    Accepts a single tag, a comma-separated list, weak tags and '*'.
    """
    if not if_none_match:
        return False
    value = if_none_match.strip()
    if value == "*":
        return True
    target = _strip_weak(fingerprint)
    return any(_strip_weak(tag.strip()) == target for tag in value.split(","))
