import re
import unicodedata
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column stores naive UTC."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def slugify(text: str, separator: str = "-") -> str:
    """ASCII-fold, lowercase and join word runs with the separator."""
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    ascii_text = re.sub(r"[^\w\s-]", "", ascii_text.lower())
    ascii_text = re.sub(r"[\s_-]+", separator, ascii_text)
    return ascii_text.strip(separator)
