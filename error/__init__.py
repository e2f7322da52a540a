
class ServerError(Exception):
    """Base class for server-related errors"""

    def __init__(self, msg="Server error occurred", status_code=500):
        self.msg = msg
        self.status_code = status_code
        super().__init__(self.msg)


class InvalidRequestError(ServerError):
    """Raised when request is invalid"""

    def __init__(self, msg="Invalid request", status_code=400):
        super().__init__(msg=msg, status_code=status_code)


class AuthenticationError(ServerError):
    """Raised when authentication fails"""

    def __init__(self, msg="Authentication failed", status_code=401):
        super().__init__(msg=msg, status_code=status_code)


class AuthorizationError(ServerError):
    """Raised when user is not authorized"""

    def __init__(self, msg="Not authorized", status_code=403):
        super().__init__(msg=msg, status_code=status_code)


class ResourceNotFoundError(ServerError):
    """Raised when requested resource is not found"""

    def __init__(self, msg="Resource not found", status_code=404):
        super().__init__(msg=msg, status_code=status_code)


class ConflictError(ServerError):
    """Raised when a request clashes with the current state of a resource"""

    def __init__(self, msg="Conflict with current state", status_code=409):
        super().__init__(msg=msg, status_code=status_code)


class DatabaseError(ServerError):
    """Raised when a database operation fails"""

    def __init__(self, msg="Database operation failed", status_code=500):
        super().__init__(msg=msg, status_code=status_code)


class DatabaseConnectionError(DatabaseError):
    """Raised when database connection fails"""

    def __init__(self, msg="Database connection failed", status_code=503):
        super().__init__(msg=msg, status_code=status_code)
