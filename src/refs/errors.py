class RefError(Exception):
    """Base class for failures reported while resolving a ref."""
    kind: str = "ref"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500

class ResolveError(RefError):
    """The hosting service answered, but with a non-successful status."""
    kind = "resolve"

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message} (statusCode: {self.status_code})"

class NetworkError(RefError):
    """No interpretable response was obtained from the hosting service.

    The status code is always 500: a sentinel for "treat as server-side and
    transient", not a status that was actually received.
    """
    kind = "network"

    def __init__(self, message: str, err: BaseException):
        super().__init__(f"{message}: {err}", status_code=500)
        self.err = err
        self.__cause__ = err

    @property
    def retryable(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message} {type(self.err).__name__}: {self.err}"
