"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    PasteNotFoundError:
        Raised when a paste is absent, expired by time or out of views.

    PasteAlreadyExistsError:
        Raised when attempting to insert a paste under an ID that is already taken.

    DataStoreError:
        Raised when the data store is unavailable (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from cloudpaste.dao.exceptions import PasteNotFoundError
    >>> raise PasteNotFoundError("Paste 'aB3dE5gH7j' not found.")
    Traceback (most recent call last):
        ...
    cloudpaste.dao.exceptions.PasteNotFoundError: Paste 'aB3dE5gH7j' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class PasteNotFoundError(DAOError):
    """Exception raised when a paste is missing, expired or has no views left.

    NOTE: the three causes are deliberately indistinguishable to callers.
    """

    pass


class PasteAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a paste whose ID already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
