"""
Object models for the admission path.

Kubernetes wire names (camelCase) are accepted as aliases; Python code uses
snake_case attributes. Only the fields the validator reads are modelled.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


@dataclass(frozen=True)
class ObjectKey:
    """Namespace/name key of a namespaced object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class ObjectMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    namespace: str = ""


class SecretBindingProvider(BaseModel):
    type: str


class SecretReference(BaseModel):
    namespace: str = ""
    name: str = ""


class SecretBinding(BaseModel):
    """A binding of a namespaced credential Secret to a provider type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    provider: SecretBindingProvider | None = None
    secret_ref: SecretReference = Field(default_factory=SecretReference, alias="secretRef")

    @property
    def provider_type(self) -> str | None:
        return self.provider.type if self.provider is not None else None


class Secret(BaseModel):
    """A credential Secret. ``data`` holds raw bytes keyed by field name."""

    model_config = ConfigDict(extra="ignore")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    data: dict[str, bytes] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _merge_string_data(cls, values: Any) -> Any:
        # stringData is write-only on the API server and wins over data.
        if not isinstance(values, dict) or not values.get("stringData"):
            return values
        values = dict(values)
        string_data = values.pop("stringData")
        if not isinstance(string_data, dict):
            raise ValueError("stringData must be a mapping of field names to strings")
        raw_data = values.get("data") or {}
        if not isinstance(raw_data, dict):
            raise ValueError("data must be a mapping of field names to strings")
        data = {k: _b64(v) for k, v in raw_data.items()}
        for key, value in string_data.items():
            if not isinstance(value, str):
                raise ValueError(f'stringData value for "{key}" must be a string')
            data[key] = value.encode()
        values["data"] = data
        return values

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {k: _b64(v) for k, v in value.items()}

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.metadata.namespace, self.metadata.name)


class UnstructuredObject(BaseModel):
    """Any object kind the validator does not model."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_version: str = Field("", alias="apiVersion")
    kind: str = ""


def _b64(value: Any) -> Any:
    """Base64-decode API-server string values; bytes pass through."""
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"data value is not valid base64: {e}") from e
    return value


def decode_object(raw: dict[str, Any] | None) -> SecretBinding | Secret | UnstructuredObject | None:
    """Decode a raw Kubernetes object into the model matching its kind."""
    if raw is None:
        return None
    kind = raw.get("kind")
    if kind == "SecretBinding":
        return SecretBinding.model_validate(raw)
    if kind == "Secret":
        return Secret.model_validate(raw)
    return UnstructuredObject.model_validate(raw)
