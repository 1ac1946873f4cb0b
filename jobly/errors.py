"""
Domain errors raised by the repositories and translators.

Callers (route handlers, the CLI) translate these into response codes
using the ``status`` attribute.
"""


class JoblyError(Exception):
    """Base class for errors surfaced to callers."""

    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Invalid or missing input: empty payload, bad filter, bad reference, duplicate."""

    status = 400


class NotFoundError(JoblyError):
    """Lookup, update or delete target does not exist."""

    status = 404
