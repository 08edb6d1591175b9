from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(AppError):
    code = "auth_error"
    status_code = 401


class PermissionDenied(AppError):
    code = "forbidden"
    status_code = 403


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class CatNotFound(NotFound):
    code = "cat_not_found"

    def __init__(self, message: str = "cat not found", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class MatchNotFound(NotFound):
    code = "match_not_found"

    def __init__(self, message: str = "match not found", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UserNotFound(NotFound):
    code = "user_not_found"

    def __init__(self, message: str = "user not found", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class CatGenderNotMatch(ConflictError):
    code = "cat_gender_not_match"
    status_code = 400

    def __init__(self, message: str = "you can't match with the same sex", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class CatAlreadyMatched(ConflictError):
    code = "cat_already_matched"
    status_code = 400

    def __init__(self, message: str = "cat already matched", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class CatSameOwner(ConflictError):
    code = "cat_same_owner"
    status_code = 400

    def __init__(self, message: str = "you can't match with your own cat", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class MatchNotValid(ConflictError):
    code = "match_not_valid"
    status_code = 400

    def __init__(self, message: str = "match not valid", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidPassword(ConflictError):
    code = "invalid_password"
    status_code = 400

    def __init__(self, message: str = "Invalid password", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500
