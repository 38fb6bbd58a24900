"""Errors raised at the boundary with the external data service."""


class PersistenceError(Exception):
    """The data service could not complete a read or write."""


class FetchError(PersistenceError):
    """Listing maintenance logs failed or returned unusable rows."""


class UploadError(PersistenceError):
    """A photo could not be stored or its public URL resolved."""


class InsertError(PersistenceError):
    """A maintenance log row could not be inserted."""
