"""
Record identifier and timestamp helpers
"""
import uuid
from datetime import datetime, timedelta, timezone

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 6
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_base36(value: int, width: int = 0) -> str:
    """
    Encode a non-negative integer in base 36 (digits then lowercase letters).

    :param value: Integer to encode
    :param width: Minimum length, left-padded with "0"
    :return: Encoded string
    """
    if value < 0:
        raise ValueError("value must be non-negative")

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])

    return "".join(reversed(digits)).rjust(max(width, 1), "0")


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    """Base-36 suffix taken from the random bits of a UUID4."""
    return to_base36(uuid.uuid4().int % (36 ** length), width=length)


def generate_feedback_id(now: datetime) -> str:
    """
    Build a record id of the form ``<epoch milliseconds>-<6 base-36 chars>``.

    Uniqueness is probabilistic: two ids only collide when they share the
    millisecond and the same 1-in-36**6 suffix. Collisions are not checked.
    """
    epoch_ms = (now - EPOCH) // timedelta(milliseconds=1)
    return f"{epoch_ms}-{random_suffix()}"


def isoformat_utc(now: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a ``Z`` suffix."""
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
