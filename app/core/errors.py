"""HTTP-facing error taxonomy.

Every error is an ``HTTPException`` so FastAPI renders it as
``{"detail": ...}`` from inside the CORS middleware.
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Resource already exists", status_code: int = status.HTTP_409_CONFLICT):
        super().__init__(status_code=status_code, detail=detail)


class AlreadyFollowing(ConflictError):
    def __init__(self, detail: str = "Already following this user"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "User not found", status_code: int = status.HTTP_404_NOT_FOUND):
        super().__init__(status_code=status_code, detail=detail)


class NotFollowing(NotFoundError):
    def __init__(self, detail: str = "Not following this user"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InternalError(HTTPException):
    # Never carries the underlying message; callers log it first.
    def __init__(self):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
