"""Tests for the LarkClient facade."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pytest_httpx import HTTPXMock

from lark_client import LarkClient, StaticTokenProvider
from lark_client.apis.endpoints import Endpoint
from lark_client.core.exceptions import AccessTokenExpiredError


class RotatingTokenProvider:
    """Hands out a new token on every forced refresh."""

    def __init__(self) -> None:
        self.generation = 1
        self.refreshes = 0

    def get_token(self, force_refresh: bool = False) -> str:
        if force_refresh:
            self.generation += 1
            self.refreshes += 1
        return f"t-{self.generation}"


class TestAuthorization:
    """Tests for token injection and refresh."""

    def test_without_token_provider(self, lark_request, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})
        client = LarkClient(request=lark_request)

        client.get("im/v1/chats")

        assert "Authorization" not in httpx_mock.get_requests()[0].headers

    def test_caller_header_overrides_token(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        client.get("im/v1/chats", headers={"Authorization": "Bearer u-user"})

        assert httpx_mock.get_requests()[0].headers["Authorization"] == "Bearer u-user"

    def test_refreshes_once_on_expiry(self, lark_request, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 99991663, "msg": "expired"})
        httpx_mock.add_response(json={"code": 0, "data": {"message_id": "om_1"}})
        provider = RotatingTokenProvider()
        client = LarkClient(token_provider=provider, request=lark_request)

        result = client.post("im/v1/messages", {"receive_id": "ou_1"})

        assert result.payload == {"message_id": "om_1"}
        assert provider.refreshes == 1
        first, second = httpx_mock.get_requests()
        assert first.headers["Authorization"] == "Bearer t-1"
        assert second.headers["Authorization"] == "Bearer t-2"

    def test_second_expiry_propagates(self, lark_request, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 99991663})
        httpx_mock.add_response(json={"code": 99991664})
        provider = RotatingTokenProvider()
        client = LarkClient(token_provider=provider, request=lark_request)

        with pytest.raises(AccessTokenExpiredError) as exc_info:
            client.get("im/v1/chats")

        assert exc_info.value.code == 99991664
        assert provider.refreshes == 1

    def test_static_token_is_not_retried(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 99991663})

        with pytest.raises(AccessTokenExpiredError):
            client.get("im/v1/chats")

        assert len(httpx_mock.get_requests()) == 1


class TestCall:
    """Tests for LarkClient.call dispatch."""

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
    def test_dispatches_by_method(self, client, method) -> None:
        endpoint = Endpoint("thing", method, "things/{thing_id}")
        verb = MagicMock(return_value="ok")
        setattr(client, method.lower(), verb)

        assert client.call(endpoint, path_args={"thing_id": "1"}, params={"a": 1}) == "ok"

        assert verb.call_args.args[0] == "things/1"
        assert verb.call_args.kwargs["params"] == {"a": 1}

    def test_form_endpoint_uses_post_form(self, client) -> None:
        client.post_form = MagicMock(return_value="ok")
        endpoint = Endpoint("upload", "POST", "uploads", form=True)

        client.call(endpoint, form={"file": b"x"}, params={"dropped": 1})

        client.post_form.assert_called_once_with(
            "uploads", {"file": b"x"}, headers=None, parse_as=None
        )


def test_context_manager_closes_transport(config) -> None:
    with LarkClient(config, token_provider=StaticTokenProvider("t")) as client:
        assert client.config is config

    assert client.request._client.is_closed
