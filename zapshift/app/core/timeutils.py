"""Time helpers shared by models and services."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current UTC time (microsecond precision)."""
    return datetime.now(timezone.utc)
