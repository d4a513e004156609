from collections.abc import Callable
from datetime import UTC, datetime

# Injected wherever "now" matters so tests can pin time.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return current UTC time as naive datetime (for PostgreSQL TIMESTAMP).

    Database columns use TIMESTAMP WITHOUT TIME ZONE, so we strip tzinfo.
    All times are stored in UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)
