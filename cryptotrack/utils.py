from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def iso_hours_ago(hours: float) -> str:
    return (utc_now() - timedelta(hours=hours)).isoformat()
