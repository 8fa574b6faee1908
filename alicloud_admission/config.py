"""
Centralized configuration for the admission webhook.

All configuration is loaded from environment variables with sensible
in-cluster defaults.

Usage:
    from alicloud_admission.config import get_config
    cfg = get_config()
    print(cfg.port)              # 9443
    print(cfg.kube.api_server)   # "https://kubernetes.default.svc"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

ENV_PREFIX = "ALICLOUD_ADMISSION_"

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")


@dataclass(frozen=True)
class KubeConfig:
    """Kubernetes API server access used by the secret reader."""

    api_server: str = "https://kubernetes.default.svc"
    token_file: Path = SERVICE_ACCOUNT_DIR / "token"
    ca_file: Path = SERVICE_ACCOUNT_DIR / "ca.crt"
    timeout: float = 10.0

    @property
    def ca_bundle(self) -> str | None:
        """CA bundle path, or None to use the system trust store."""
        return str(self.ca_file) if self.ca_file.exists() else None

    def read_token(self) -> str | None:
        if not self.token_file.exists():
            return None
        return self.token_file.read_text().strip() or None


@dataclass(frozen=True)
class Config:
    """Top-level webhook configuration."""

    host: str = "0.0.0.0"
    port: int = 9443
    tls_cert_file: str = ""  # empty = plain HTTP (TLS terminated elsewhere)
    tls_key_file: str = ""
    log_level: str = "INFO"

    kube: KubeConfig = field(default_factory=KubeConfig)

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_cert_file and self.tls_key_file)


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _env(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    kube = KubeConfig(
        api_server=_env("KUBE_API_SERVER", "https://kubernetes.default.svc").rstrip("/"),
        token_file=Path(_env("KUBE_TOKEN_FILE", str(SERVICE_ACCOUNT_DIR / "token"))),
        ca_file=Path(_env("KUBE_CA_FILE", str(SERVICE_ACCOUNT_DIR / "ca.crt"))),
        timeout=float(_env("KUBE_TIMEOUT", "10.0")),
    )

    return Config(
        host=_env("HOST", "0.0.0.0"),
        port=int(_env("PORT", "9443")),
        tls_cert_file=_env("TLS_CERT_FILE", ""),
        tls_key_file=_env("TLS_KEY_FILE", ""),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        kube=kube,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
