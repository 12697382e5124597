class LibraryError(Exception):
    """Base for errors that are reported to API clients as ``{"message": ...}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    status_code = 400


class AuthError(LibraryError):
    status_code = 401


class PolicyError(LibraryError):
    status_code = 400


class StorageError(LibraryError):
    status_code = 500


class TransportError(LibraryError):
    status_code = 500
