"""Errors raised by the user files service.

Each error carries the HTTP status the routers translate it to.
"""


class UserFilesError(Exception):
    """Base class for expected filesystem service failures"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(UserFilesError):
    """Missing or malformed input, detected before touching the filesystem"""

    status_code = 400


class PathOutsideRootError(UserFilesError):
    """A relative path resolved outside the user files directory"""

    status_code = 400


class NotADirectoryPathError(UserFilesError):
    """The target exists but is not a directory"""

    status_code = 400


class PathNotFoundError(UserFilesError):
    status_code = 404


class AlreadyExistsError(UserFilesError):
    status_code = 409
