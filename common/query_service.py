"""
Query pipeline for one request.

Takes the raw provider payload (already fetched), picks the requested
group, checks the client's fingerprint, resolves slots with the fallback
store and renders the answer. Nothing here touches the network or the clock.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .data_source import UpstreamUnavailable
from .fallback import FallbackStore, resolve_slots
from .fingerprint import fingerprint_matches, make_fingerprint
from .formatting import format_group_not_found
from .models import GroupSchedule, definite_slots
from .query_engine import QueryContext, answer_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    text: str = ""
    etag: Optional[str] = None
    not_modified: bool = False

    @property
    def cacheable(self) -> bool:
        return self.etag is not None


def build_query_result(
    payload: Mapping[str, Any],
    group_id: str,
    mode: str,
    store: FallbackStore,
    now_minute: int,
    if_none_match: Optional[str] = None,
) -> QueryResult:
    """
    Answers a query against a fetched payload.

    Returns:
        QueryResult with text and fingerprint, or not_modified=True when the
        client already holds the current fingerprint. Unknown groups give a
        text without fingerprint.

    Raises:
        UpstreamUnavailable: If the group's payload has a broken shape.
    """
    raw_group = payload.get(group_id)
    # Empty placeholders ([], 0, "") mean "no such group"; an empty object is a group without data
    if raw_group is None or (not raw_group and not isinstance(raw_group, dict)):
        logger.info(f"Group {group_id} not found in provider payload")
        return QueryResult(text=format_group_not_found(group_id))

    try:
        group = GroupSchedule.from_raw(group_id, raw_group)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Malformed schedule for group {group_id}: {e}")
        raise UpstreamUnavailable(f"Malformed schedule for group {group_id}") from e

    etag = make_fingerprint(group)
    if fingerprint_matches(if_none_match, etag):
        logger.debug(f"Fingerprint {etag} matches, not modified")
        return QueryResult(etag=etag, not_modified=True)

    resolved = resolve_slots(
        store,
        group_id,
        group.today.status,
        definite_slots(group.today),
        updated_on=group.updated_on,
    )

    ctx = QueryContext(
        resolved_slots=resolved.slots,
        now_minute=now_minute,
        is_fallback=resolved.is_fallback,
        today_status=group.today.status,
        tomorrow_status=group.tomorrow.status,
        tomorrow_slots=definite_slots(group.tomorrow),
    )
    return QueryResult(text=answer_query(ctx, mode), etag=etag)
