import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Text
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


class TagList(TypeDecorator):
    """
    A list of strings persisted as a JSON-encoded text column.

    Values that are not a JSON array of strings read back as an empty list.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Optional[List[str]], dialect) -> str:
        if isinstance(value, str):
            value = parse_tags(value)
        return json.dumps(list(value or []), ensure_ascii=False)

    def process_result_value(self, value: Optional[str], dialect) -> List[str]:
        return parse_tags(value)


def parse_tags(raw) -> List[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return [str(tag) for tag in raw]
    try:
        tags = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unparsable tags value %r", raw)
        return []
    if not isinstance(tags, list):
        logger.warning("Discarding non-list tags value %r", raw)
        return []
    return [str(tag) for tag in tags]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp. Naive values are taken to be UTC on the way
    in; values always come back as aware UTC datetimes, including from
    backends such as SQLite that drop the offset.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
