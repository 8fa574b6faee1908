"""
SecretBinding validator.

Checks that a SecretBinding of provider type "alicloud" references a Secret
holding a well-formed AccessKey pair. On update, the Secret is only re-checked
when the provider type changed; unrelated updates pass without a read.

Usage:
    validator = SecretBindingValidator(KubeSecretReader(client))
    await validator.validate(new_binding, old_binding)   # raises on rejection
"""

from __future__ import annotations

import logging

from alicloud_admission import alicloud
from alicloud_admission.errors import WrongObjectTypeError
from alicloud_admission.models import ObjectKey, SecretBinding
from alicloud_admission.reader import SecretReader
from alicloud_admission.secrets import validate_cloud_provider_secret

logger = logging.getLogger(__name__)


class SecretBindingValidator:
    """Stateless validator; the reader is the only collaborator and is never reassigned."""

    def __init__(self, reader: SecretReader) -> None:
        self._reader = reader

    @property
    def reader(self) -> SecretReader:
        return self._reader

    async def validate(self, new: object, old: object | None = None) -> None:
        """Validate ``new`` (and, on update, ``old``) before admission.

        Returns None to admit. Raises WrongObjectTypeError for non-SecretBinding
        input, CredentialFormatError for a malformed Secret, and re-raises
        whatever the reader raised when the Secret cannot be fetched.
        """
        if not isinstance(new, SecretBinding):
            raise WrongObjectTypeError(new)
        if old is not None and not isinstance(old, SecretBinding):
            raise WrongObjectTypeError(old, old=True)

        binding_name = f"{new.metadata.namespace}/{new.metadata.name}"

        if new.provider_type != alicloud.TYPE:
            logger.debug(
                "SecretBinding %s has provider type %r, skipping", binding_name, new.provider_type
            )
            return

        # An absent old provider never equals a present type.
        if old is not None and old.provider_type == new.provider_type:
            logger.debug(
                "SecretBinding %s: provider type unchanged, skipping secret check", binding_name
            )
            return

        key = ObjectKey(new.secret_ref.namespace, new.secret_ref.name)
        try:
            secret = await self._reader.get(key)
            validate_cloud_provider_secret(secret)
        except Exception as e:
            logger.info("Rejecting SecretBinding %s (secret %s): %s", binding_name, key, e)
            raise

        logger.debug("SecretBinding %s: secret %s is valid", binding_name, key)
