"""
Secret readers — read-only access to the credential Secrets a binding references.

The validator only depends on the SecretReader protocol. Two implementations
ship here:

    KubeSecretReader    reads from the Kubernetes API over httpx
    StaticSecretReader  serves a fixed set of Secrets from memory
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import Iterable
from typing import Protocol

import httpx

from alicloud_admission.config import KubeConfig
from alicloud_admission.errors import SecretFetchError, SecretNotFoundError
from alicloud_admission.models import ObjectKey, Secret

logger = logging.getLogger(__name__)


class SecretReader(Protocol):
    """Read-only accessor for namespaced Secrets. Must be safe for concurrent use."""

    async def get(self, key: ObjectKey) -> Secret: ...


class KubeSecretReader:
    """Reads Secrets from the Kubernetes API with a shared httpx.AsyncClient.

    The client owns base URL, auth and timeout; see build_kube_client().
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(self, key: ObjectKey) -> Secret:
        path = f"/api/v1/namespaces/{key.namespace}/secrets/{key.name}"
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as e:
            raise SecretFetchError(f"failed to get secret {key}: {e}", key=key) from e

        if resp.status_code == 404:
            raise SecretNotFoundError(key)
        if resp.status_code >= 400:
            raise SecretFetchError(
                f"failed to get secret {key}: {_status_message(resp)}",
                key=key,
                status_code=resp.status_code,
            )

        try:
            secret = Secret.model_validate(resp.json())
        except ValueError as e:
            raise SecretFetchError(f"failed to decode secret {key}: {e}", key=key) from e

        logger.debug("Fetched secret %s", key)
        return secret


class StaticSecretReader:
    """In-memory reader over a fixed collection of Secrets."""

    def __init__(self, secrets: Iterable[Secret] = ()) -> None:
        self._secrets = {s.key: s for s in secrets}

    async def get(self, key: ObjectKey) -> Secret:
        secret = self._secrets.get(key)
        if secret is None:
            raise SecretNotFoundError(key)
        return secret


def build_kube_client(cfg: KubeConfig) -> httpx.AsyncClient:
    """Build an AsyncClient for the API server described by ``cfg``."""
    headers = {"Accept": "application/json"}
    token = cfg.read_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    verify: ssl.SSLContext | bool = True
    if cfg.ca_bundle:
        verify = ssl.create_default_context(cafile=cfg.ca_bundle)
    return httpx.AsyncClient(
        base_url=cfg.api_server,
        headers=headers,
        verify=verify,
        timeout=cfg.timeout,
    )


def _status_message(resp: httpx.Response) -> str:
    """Extract the message of a Kubernetes Status body, falling back to the reason phrase."""
    try:
        body = resp.json()
    except ValueError:
        return f"{resp.status_code} {resp.reason_phrase}"
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return f"{resp.status_code} {resp.reason_phrase}"
