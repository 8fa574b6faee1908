"""
Root-level shared test fixtures.

Provides SecretBinding/Secret builders and an environment-cleaning fixture.
"""

from __future__ import annotations

import os

import pytest

from alicloud_admission import alicloud
from alicloud_admission.models import (
    ObjectMeta,
    Secret,
    SecretBinding,
    SecretBindingProvider,
    SecretReference,
)

NAMESPACE = "garden-dev"
NAME = "my-provider-account"

VALID_ACCESS_KEY_ID = b"a" * 16
VALID_ACCESS_KEY_SECRET = b"b" * 30


@pytest.fixture
def clean_env(monkeypatch):
    """Remove ALICLOUD_ADMISSION_* env vars that leak between tests."""
    for key in list(os.environ):
        if key.startswith("ALICLOUD_ADMISSION_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def binding():
    """An alicloud SecretBinding pointing at garden-dev/my-provider-account."""
    return SecretBinding(
        metadata=ObjectMeta(name="my-binding", namespace=NAMESPACE),
        provider=SecretBindingProvider(type=alicloud.TYPE),
        secret_ref=SecretReference(namespace=NAMESPACE, name=NAME),
    )


@pytest.fixture
def valid_secret():
    return Secret(
        metadata=ObjectMeta(name=NAME, namespace=NAMESPACE),
        data={
            alicloud.ACCESS_KEY_ID: VALID_ACCESS_KEY_ID,
            alicloud.ACCESS_KEY_SECRET: VALID_ACCESS_KEY_SECRET,
        },
    )


@pytest.fixture
def invalid_secret():
    return Secret(metadata=ObjectMeta(name=NAME, namespace=NAMESPACE), data={"foo": b"bar"})
