"""Error taxonomy shared by the core and the shell.

Numeric stages never raise: missing prerequisites resolve to zero or empty
defaults. These exceptions cover input, lookup and storage failures only.
"""


class FitLogrError(Exception):
    """Base class for errors surfaced to callers."""


class ValidationError(FitLogrError):
    """Missing or malformed input; the request is rejected before computing."""


class NotFoundError(FitLogrError):
    """Unknown user or program."""


class StoreError(FitLogrError):
    """The underlying store failed. Not retried here."""
