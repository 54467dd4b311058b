# boxoffice/domain/timestamps.py
#
# Every stored timestamp uses one fixed, zero-padded UTC layout
# (YYYY-MM-DDTHH:MM:SS.mmmZ) so that string order equals time order.

from datetime import datetime, timezone


def to_iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def normalize_iso(value: str) -> str:
    """
    Rewrites any ISO-8601 timestamp into the stored layout.
    Naive values are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value!r}") from exc
    return to_iso(moment)
