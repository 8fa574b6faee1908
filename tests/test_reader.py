"""Tests for alicloud_admission.reader — Kubernetes and in-memory secret readers."""

from __future__ import annotations

import base64

import httpx
import pytest

from alicloud_admission.config import KubeConfig
from alicloud_admission.errors import SecretFetchError, SecretNotFoundError
from alicloud_admission.models import ObjectKey
from alicloud_admission.reader import KubeSecretReader, StaticSecretReader, build_kube_client

KEY = ObjectKey("garden-dev", "my-provider-account")


def _secret_body() -> dict:
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": KEY.name, "namespace": KEY.namespace},
        "data": {"accessKeyID": base64.b64encode(b"a" * 16).decode()},
    }


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://kube.test")


class TestKubeSecretReader:
    @pytest.mark.asyncio
    async def test_get(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=_secret_body())

        async with _client(handler) as client:
            secret = await KubeSecretReader(client).get(KEY)

        assert seen == ["/api/v1/namespaces/garden-dev/secrets/my-provider-account"]
        assert secret.data["accessKeyID"] == b"a" * 16
        assert secret.key == KEY

    @pytest.mark.asyncio
    async def test_not_found(self):
        async with _client(lambda r: httpx.Response(404, json={"kind": "Status"})) as client:
            with pytest.raises(SecretNotFoundError) as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.status_code == 404
        assert exc.value.key == KEY
        assert "not found" in str(exc.value)

    @pytest.mark.asyncio
    async def test_forbidden_uses_status_message(self):
        body = {"kind": "Status", "message": 'secrets "my-provider-account" is forbidden'}
        async with _client(lambda r: httpx.Response(403, json=body)) as client:
            with pytest.raises(SecretFetchError) as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.status_code == 403
        assert "is forbidden" in str(exc.value)

    @pytest.mark.asyncio
    async def test_server_error_without_json(self):
        async with _client(lambda r: httpx.Response(503, text="upstream down")) as client:
            with pytest.raises(SecretFetchError) as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.status_code == 503
        assert "503" in str(exc.value)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(SecretFetchError) as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.status_code == 500
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with _client(lambda r: httpx.Response(200, text="<html>proxy</html>")) as client:
            with pytest.raises(SecretFetchError) as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.status_code == 500
        assert str(exc.value).startswith("failed to decode secret garden-dev/my-provider-account")

    @pytest.mark.asyncio
    async def test_invalid_base64_data(self):
        body = _secret_body()
        body["data"] = {"accessKeyID": "!!notb64"}
        async with _client(lambda r: httpx.Response(200, json=body)) as client:
            with pytest.raises(SecretFetchError, match="failed to decode secret") as exc:
                await KubeSecretReader(client).get(KEY)

        assert exc.value.key == KEY


class TestStaticSecretReader:
    @pytest.mark.asyncio
    async def test_get(self, valid_secret):
        reader = StaticSecretReader([valid_secret])
        assert await reader.get(valid_secret.key) is valid_secret

    @pytest.mark.asyncio
    async def test_missing(self):
        with pytest.raises(SecretNotFoundError):
            await StaticSecretReader().get(KEY)


class TestBuildKubeClient:
    @pytest.mark.asyncio
    async def test_token_and_base_url(self, tmp_path):
        token = tmp_path / "token"
        token.write_text("s3cr3t\n")
        cfg = KubeConfig(
            api_server="https://api.example.com",
            token_file=token,
            ca_file=tmp_path / "missing.crt",
        )

        async with build_kube_client(cfg) as client:
            assert client.base_url.host == "api.example.com"
            assert client.headers["Authorization"] == "Bearer s3cr3t"
            assert client.timeout.read == cfg.timeout

    @pytest.mark.asyncio
    async def test_no_token(self, tmp_path):
        cfg = KubeConfig(token_file=tmp_path / "none", ca_file=tmp_path / "missing.crt")

        async with build_kube_client(cfg) as client:
            assert "Authorization" not in client.headers
