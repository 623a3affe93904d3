"""Domain error kinds and their HTTP mapping.

Error code ranges:
  1xxx: Auth/Token
  2xxx: Account
  3xxx: Post
  4xxx: Comment
  8xxx: Validation
  9xxx: System

Cache errors are not ``AppError`` subclasses: they are recoverable signals
between the cache layer and the handlers and never reach the client.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Token ---

class TokenInvalidError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Token Invalid", 401)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email or password", 401)


# --- 2xxx: Account ---

class NotFoundAccountIDError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2001, f"Account not found: {account_id}", 404)


class UnauthorizedAccountIDError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2002, f"Account {account_id} is not the owner of this resource", 403)


class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Email already exists", 409)


class FollowExistsError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2005, f"Already following account: {account_id}", 409)


class NotFoundFollowError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2006, f"Not following account: {account_id}", 404)


# --- 3xxx: Post ---

class NotFoundPostIDError(AppError):
    def __init__(self, post_id: str) -> None:
        super().__init__(3001, f"Post not found: {post_id}", 404)


# --- 4xxx: Comment ---

class NotFoundCommentIDError(AppError):
    def __init__(self, comment_id: str) -> None:
        super().__init__(4001, f"Comment not found: {comment_id}", 404)


# --- 8xxx: Validation ---

class ValidationFailedError(AppError):
    """Request data rejected before reaching the data layer.

    ``errors`` maps each offending field to a human readable message and is
    rendered verbatim in the 400 response body.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__(8001, "Validation failed", 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9001, detail, 500)


# --- Cache signals ---

class CacheError(Exception):
    """Base for cache-layer outcomes that callers recover from."""


class CacheNotFoundError(CacheError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Cache miss: {key}")


class CacheUnavailableError(CacheError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cache unavailable: {reason}")
