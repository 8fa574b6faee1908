"""
Format checks for Alibaba Cloud credential Secrets.

Usage:
    from alicloud_admission.secrets import validate_cloud_provider_secret

    validate_cloud_provider_secret(secret)   # raises CredentialFormatError
"""

from __future__ import annotations

from alicloud_admission.alicloud import (
    ACCESS_KEY_ID,
    ACCESS_KEY_ID_MIN_LEN,
    ACCESS_KEY_SECRET,
    ACCESS_KEY_SECRET_LEN,
)
from alicloud_admission.errors import CredentialFormatError
from alicloud_admission.models import Secret


def validate_cloud_provider_secret(secret: Secret) -> None:
    """Check that ``secret`` carries a well-formed Alibaba Cloud AccessKey pair.

    See https://www.alibabacloud.com/help/doc-detail/116401.htm for the key
    formats. Fields are checked in order and the first violation is raised.

    Raises:
        CredentialFormatError: naming the missing or malformed field.
    """
    secret_key = str(secret.key)

    access_key_id = _required(secret, ACCESS_KEY_ID, secret_key)
    if len(access_key_id) < ACCESS_KEY_ID_MIN_LEN:
        raise CredentialFormatError(
            f'field "{ACCESS_KEY_ID}" in secret {secret_key} must have at least '
            f"{ACCESS_KEY_ID_MIN_LEN} characters",
            field=ACCESS_KEY_ID,
            secret_key=secret_key,
        )

    access_key_secret = _required(secret, ACCESS_KEY_SECRET, secret_key)
    if len(access_key_secret) != ACCESS_KEY_SECRET_LEN:
        raise CredentialFormatError(
            f'field "{ACCESS_KEY_SECRET}" in secret {secret_key} must have exactly '
            f"{ACCESS_KEY_SECRET_LEN} characters",
            field=ACCESS_KEY_SECRET,
            secret_key=secret_key,
        )


def _required(secret: Secret, field: str, secret_key: str) -> bytes:
    value = secret.data.get(field)
    if value is None:
        raise CredentialFormatError(
            f'missing "{field}" field in secret {secret_key}',
            field=field,
            secret_key=secret_key,
        )
    if value.strip() != value:
        raise CredentialFormatError(
            f'field "{field}" in secret {secret_key} must not contain leading or '
            "trailing whitespace",
            field=field,
            secret_key=secret_key,
        )
    return value
