"""
Admission errors.

Every rejection raised by this package derives from AdmissionError. The
webhook maps each subclass onto an HTTP status for the AdmissionReview
response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from alicloud_admission.models import ObjectKey


class AdmissionError(Exception):
    """Base class for admission rejections."""

    status_code: int = 500


class WrongObjectTypeError(AdmissionError, TypeError):
    """The new (or old) object handed to the validator is not a SecretBinding."""

    status_code = 400

    def __init__(self, obj: object, *, old: bool = False) -> None:
        self.obj_type = type(obj).__name__
        self.old = old
        message = f"wrong object type {self.obj_type}"
        if old:
            message += " for old object"
        super().__init__(message)


class SecretFetchError(AdmissionError):
    """The referenced Secret could not be read."""

    def __init__(self, message: str, *, key: ObjectKey, status_code: int | None = None) -> None:
        super().__init__(message)
        self.key = key
        if status_code is not None:
            self.status_code = status_code


class SecretNotFoundError(SecretFetchError):
    def __init__(self, key: ObjectKey) -> None:
        super().__init__(
            f'secrets "{key.name}" not found in namespace {key.namespace}',
            key=key,
            status_code=404,
        )


class CredentialFormatError(AdmissionError, ValueError):
    """A credential Secret lacks a required field or a field is malformed."""

    status_code = 422

    def __init__(self, message: str, *, field: str, secret_key: str) -> None:
        super().__init__(message)
        self.field = field
        self.secret_key = secret_key
