"""Exception types for the treasury explorer."""


class TreasuryError(Exception):
    """Base class for errors raised by this package."""


class FetchError(TreasuryError):
    """An upstream request failed.

    Raised for non-2xx responses, transport failures and bodies that are not
    valid JSON. ``status`` is ``None`` when no HTTP response was received.
    """

    def __init__(self, path: str, status_text: str, status: int | None = None):
        self.path = path
        self.status_text = status_text
        self.status = status
        super().__init__(f"Failed to fetch {path}: {status_text}")


class ParseError(TreasuryError, ValueError):
    """A date or timestamp string could not be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unparseable date: {value!r}")
