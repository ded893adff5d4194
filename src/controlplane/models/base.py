from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current UTC time without tzinfo.

    Control-plane timestamp columns are ``TIMESTAMP WITHOUT TIME ZONE`` and
    hold UTC by convention; asyncpg rejects aware values for them.
    """
    return datetime.now(UTC).replace(tzinfo=None)
