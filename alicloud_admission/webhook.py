"""
Admission webhook — FastAPI service serving the SecretBinding validator.

The API server posts admission.k8s.io/v1 AdmissionReview objects for
SecretBinding CREATE/UPDATE requests; the response carries the verdict.

Start:
  alicloud-admission serve
  # or
  uvicorn alicloud_admission.webhook:app --host 0.0.0.0 --port 9443
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from alicloud_admission import __version__
from alicloud_admission.config import get_config
from alicloud_admission.errors import AdmissionError
from alicloud_admission.models import decode_object
from alicloud_admission.reader import KubeSecretReader, build_kube_client
from alicloud_admission.validator import SecretBindingValidator

logger = logging.getLogger(__name__)

VALIDATE_PATH = "/webhooks/validate-secretbinding"

VALIDATED_OPERATIONS = {"CREATE", "UPDATE"}


# ─── AdmissionReview Models ──────────────────────────────────────────


class GroupVersionKind(BaseModel):
    group: str = ""
    version: str = ""
    kind: str = ""


class AdmissionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str
    kind: GroupVersionKind = Field(default_factory=GroupVersionKind)
    operation: str = "CREATE"
    namespace: str = ""
    name: str = ""
    object: dict[str, Any] | None = None
    old_object: dict[str, Any] | None = Field(None, alias="oldObject")
    dry_run: bool = Field(False, alias="dryRun")


class AdmissionStatus(BaseModel):
    code: int
    message: str


class AdmissionResponse(BaseModel):
    uid: str
    allowed: bool
    status: AdmissionStatus | None = None


class AdmissionReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field("admission.k8s.io/v1", alias="apiVersion")
    kind: str = "AdmissionReview"
    request: AdmissionRequest | None = None
    response: AdmissionResponse | None = None


# ─── App ─────────────────────────────────────────────────────────────


def create_app(validator: SecretBindingValidator | None = None) -> FastAPI:
    """Build the webhook app.

    With no ``validator``, the lifespan builds one backed by the Kubernetes
    API using the process config and closes its HTTP client on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if validator is not None:
            yield
            return
        cfg = get_config()
        client = build_kube_client(cfg.kube)
        app.state.validator = SecretBindingValidator(KubeSecretReader(client))
        logger.info("Secret reader bound to %s", cfg.kube.api_server)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Alicloud SecretBinding Admission",
        description="Validating admission webhook for Alibaba Cloud SecretBindings.",
        version=__version__,
        lifespan=lifespan,
    )
    if validator is not None:
        app.state.validator = validator

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    @app.post(VALIDATE_PATH, response_model=AdmissionReview, response_model_exclude_none=True)
    async def validate_secretbinding(
        review: AdmissionReview, request: Request
    ) -> AdmissionReview:
        if review.request is None:
            raise HTTPException(status_code=400, detail="AdmissionReview without request")
        response = await review_request(request.app.state.validator, review.request)
        return AdmissionReview(apiVersion=review.api_version, response=response)

    return app


async def review_request(
    validator: SecretBindingValidator, req: AdmissionRequest
) -> AdmissionResponse:
    """Run the validator for one admission request and build the verdict."""
    if req.operation not in VALIDATED_OPERATIONS:
        return AdmissionResponse(uid=req.uid, allowed=True)

    try:
        new = decode_object(req.object)
        old = decode_object(req.old_object) if req.operation == "UPDATE" else None
    except ValueError as e:
        return _denied(req, 400, f"undecodable object: {e}")

    try:
        await validator.validate(new, old)
    except AdmissionError as e:
        return _denied(req, e.status_code, str(e))
    except Exception as e:
        logger.exception(
            "Validation of %s %s/%s failed unexpectedly", req.kind.kind, req.namespace, req.name
        )
        return _denied(req, 500, str(e))

    logger.info("Admitted %s%s", _describe(req), " (dry run)" if req.dry_run else "")
    return AdmissionResponse(uid=req.uid, allowed=True)


def _describe(req: AdmissionRequest) -> str:
    return f"{req.operation} {req.kind.kind} {req.namespace}/{req.name}"


def _denied(req: AdmissionRequest, code: int, message: str) -> AdmissionResponse:
    dry_run = " (dry run)" if req.dry_run else ""
    logger.info("Denied %s%s: %s", _describe(req), dry_run, message)
    return AdmissionResponse(
        uid=req.uid, allowed=False, status=AdmissionStatus(code=code, message=message)
    )


app = create_app()
