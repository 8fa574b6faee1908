"""
Alicloud admission — validates SecretBindings that point at Alibaba Cloud credentials.

Public API:
    SecretBindingValidator(reader)      → validator bound to a secret reader
    validate_cloud_provider_secret(s)   → format check of a credential Secret
"""

from __future__ import annotations

__version__ = "0.1.0"

from alicloud_admission.secrets import validate_cloud_provider_secret
from alicloud_admission.validator import SecretBindingValidator

__all__ = ["SecretBindingValidator", "validate_cloud_provider_secret", "__version__"]
