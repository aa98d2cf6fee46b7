import re
import time
from dataclasses import dataclass

from annotate.errors import (
    FutureTimestampError,
    InvalidContentError,
    InvalidTimestampError,
    MissingDelimiterError,
)

MAX_CREATED_AT = 2**64 - 1

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

_TIMESTAMP = re.compile(r"\+?[0-9]+")


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Annotation:
    content: str
    created_at: int  # milliseconds since the Unix epoch

    def __post_init__(self):
        if "\n" in self.content or "\r" in self.content:
            raise InvalidContentError("Annotation content must fit on a single line")
        try:
            self.content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidContentError(f"Annotation content is not valid UTF-8 text: {e}") from e
        if not 0 <= self.created_at <= MAX_CREATED_AT:
            raise ValueError(f"created_at out of range: {self.created_at}")

    @classmethod
    def new(cls, content: str, now: int | None = None) -> "Annotation":
        """Create an annotation stamped with `now` (ms) or the current time."""
        return cls(content=content, created_at=now_ms() if now is None else now)

    @classmethod
    def parse(cls, line: str) -> "Annotation":
        """Parse a stored `<created_at> <content>` line.

        The line is split at the first space; everything after that single
        space is content, verbatim. Content that itself starts with digits
        and a space is indistinguishable from a record missing its timestamp.
        """
        prefix, sep, content = line.partition(" ")
        if not sep:
            raise MissingDelimiterError(line)
        if not _TIMESTAMP.fullmatch(prefix) or int(prefix) > MAX_CREATED_AT:
            raise InvalidTimestampError(line, prefix)
        return cls(content=content, created_at=int(prefix))

    def serialize(self) -> str:
        return f"{self.created_at} {self.content}"

    def format_relative_age(self, now: int | None = None) -> str:
        """Render the time since creation in its largest whole unit."""
        if now is None:
            now = now_ms()
        delta = now - self.created_at
        if delta < 0:
            raise FutureTimestampError(
                f"Annotation created at {self.created_at} is in the future (now is {now})"
            )

        seconds = delta // SECOND_MS
        if seconds == 0:
            return "Just now"
        if seconds < 60:
            return f"{seconds} seconds ago"

        minutes = delta // MINUTE_MS
        if minutes < 60:
            return f"{minutes} minutes ago"

        hours = delta // HOUR_MS
        if hours < 24:
            return f"{hours} hours ago"

        days = delta // DAY_MS
        if days < 365:
            return f"{days} days ago"

        return f"{days // 365} years ago"

    def __str__(self) -> str:
        return f"({self.created_at}, {self.content})"
