"""Alibaba Cloud provider constants."""

from __future__ import annotations

# Provider type tag carried by SecretBinding.provider.type
TYPE = "alicloud"

# Secret data keys
ACCESS_KEY_ID = "accessKeyID"
ACCESS_KEY_SECRET = "accessKeySecret"

# Alibaba Cloud AccessKey IDs have at least 16 characters, secrets exactly 30.
ACCESS_KEY_ID_MIN_LEN = 16
ACCESS_KEY_SECRET_LEN = 30
