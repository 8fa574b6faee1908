"""
Alicloud admission CLI — entry point for all operations.

Usage:
    alicloud-admission serve                 # Start the admission webhook
    alicloud-admission check secret.yaml     # Check a credential Secret manifest
    alicloud-admission validate binding.yaml --secret secret.yaml [--old old.yaml]
    alicloud-admission version               # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from alicloud_admission.errors import AdmissionError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="alicloud-admission",
        description="Validating admission webhook for Alibaba Cloud SecretBindings.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the admission webhook")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from config)")

    # check
    check_parser = subparsers.add_parser("check", help="Check a credential Secret manifest")
    check_parser.add_argument("secret", type=Path, help="Secret manifest (YAML or JSON)")

    # validate
    validate_parser = subparsers.add_parser(
        "validate", help="Validate a SecretBinding manifest offline"
    )
    validate_parser.add_argument("binding", type=Path, help="SecretBinding manifest")
    validate_parser.add_argument(
        "--secret", type=Path, action="append", default=[], help="Secret manifest (repeatable)"
    )
    validate_parser.add_argument(
        "--old", type=Path, help="Previous SecretBinding manifest (update)"
    )

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from alicloud_admission import __version__

        print(f"alicloud-admission {__version__}")
        return 0

    if args.command == "serve":
        return _cmd_serve(args)
    elif args.command == "check":
        return _cmd_check(args)
    elif args.command == "validate":
        return _cmd_validate(args)

    parser.print_help()
    return 0


def _setup_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_manifest(path: Path) -> dict[str, Any]:
    """Load a single-document YAML (or JSON) manifest."""
    with path.open() as f:
        doc = yaml.safe_load(f)
    if not isinstance(doc, dict):
        raise ValueError(f"{path}: expected a single object manifest")
    return doc


def _cmd_serve(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is required. Install with: pip install alicloud-admission[api]")
        return 1

    from alicloud_admission.config import get_config

    cfg = get_config()
    _setup_logging(cfg.log_level)

    host = args.host or cfg.host
    port = args.port or cfg.port
    kwargs: dict[str, Any] = {}
    if cfg.tls_enabled:
        kwargs["ssl_certfile"] = cfg.tls_cert_file
        kwargs["ssl_keyfile"] = cfg.tls_key_file

    print(f"Starting SecretBinding admission webhook on {host}:{port}...")
    uvicorn.run(
        "alicloud_admission.webhook:app",
        host=host,
        port=port,
        log_level=cfg.log_level.lower(),
        **kwargs,
    )
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    from alicloud_admission.models import Secret
    from alicloud_admission.secrets import validate_cloud_provider_secret

    try:
        secret = Secret.model_validate(_load_manifest(args.secret))
        validate_cloud_provider_secret(secret)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1

    print(f"OK: secret {secret.key} holds a valid Alibaba Cloud AccessKey pair")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    from alicloud_admission.models import Secret, decode_object
    from alicloud_admission.reader import StaticSecretReader
    from alicloud_admission.validator import SecretBindingValidator

    try:
        new = decode_object(_load_manifest(args.binding))
        old = decode_object(_load_manifest(args.old)) if args.old else None
        secrets = [Secret.model_validate(_load_manifest(p)) for p in args.secret]
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1

    validator = SecretBindingValidator(StaticSecretReader(secrets))
    try:
        asyncio.run(validator.validate(new, old))
    except AdmissionError as e:
        print(f"Denied: {e}")
        return 1

    print("Allowed")
    return 0
