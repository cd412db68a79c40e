class LibraryError(Exception):
    """Base class for errors raised by the library core."""


class ValidationError(LibraryError, ValueError):
    pass


class BookNotFoundError(LibraryError, LookupError):
    pass


class BookUnavailableError(LibraryError, LookupError):
    pass


class StudentExistsError(LibraryError, ValueError):
    pass


class IssueLimitError(LibraryError, ValueError):
    pass


class AlreadyIssuedError(LibraryError, ValueError):
    pass
