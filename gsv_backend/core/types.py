from datetime import datetime, timezone
from typing import Any, Optional, Union

# Tables mix bigint (volunteers, volunteer_hours, volunteer_documents) and uuid keys
RowId = Union[int, str]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a Postgres/ISO timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
