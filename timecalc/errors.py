from __future__ import annotations


class InvalidIntervalText(ValueError):
    """Raised by the parser when interval text is not MM or HMM."""

    def __init__(self, text: str):
        super().__init__(f"not a valid interval: {text!r}")
        self.text = text


class ParseError(Exception):
    """An interval in the schedule could not be parsed."""

    def __init__(self, position: int, text: str = ""):
        super().__init__(f"invalid input at interval {position}: {text!r}")
        self.position = position
        self.text = text


class NoActiveInterval(Exception):
    """Countdown requested but interval #1 is blank or invalid."""
