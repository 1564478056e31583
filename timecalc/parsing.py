from __future__ import annotations
from typing import Optional

from .errors import InvalidIntervalText


def parse_interval(text: str) -> Optional[int]:
    """
    Interval text to minutes.

    - blank -> None (no interval, not an error)
    - "M" / "MM" -> minutes
    - "HMM" -> H hours + MM minutes (MM < 60)

    Anything else raises InvalidIntervalText.
    """
    s = (text or "").strip()
    if not s:
        return None

    # str.isdigit() accepts superscripts and other unicode digits
    if not (s.isascii() and s.isdigit()):
        raise InvalidIntervalText(text)

    if len(s) <= 2:
        return int(s)

    if len(s) == 3:
        value = int(s)
        hours, minutes = divmod(value, 100)
        if hours >= 10 or minutes >= 60:
            raise InvalidIntervalText(text)
        return hours * 60 + minutes

    raise InvalidIntervalText(text)

