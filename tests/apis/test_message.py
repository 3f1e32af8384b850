"""Tests for message API operations."""

from __future__ import annotations

import json

from pytest_httpx import HTTPXMock


def _sent_body(httpx_mock: HTTPXMock) -> dict:
    return json.loads(httpx_mock.get_requests()[0].content)


class TestSendMessage:
    """Tests for send_message and its variants."""

    def test_send_message(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0, "data": {"message_id": "om_1"}})
        payload = {
            "receive_id": "oc_1",
            "msg_type": "text",
            "content": json.dumps({"text": "hi"}),
        }

        result = client.send_message(payload, receive_id_type="chat_id")

        assert result.payload["message_id"] == "om_1"
        request = httpx_mock.get_requests()[0]
        assert request.method == "POST"
        assert request.url.path.endswith("/im/v1/messages")
        assert dict(request.url.params) == {"receive_id_type": "chat_id"}
        assert request.headers["Authorization"] == "Bearer t-test"
        assert _sent_body(httpx_mock) == payload

    def test_default_receive_id_type(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        client.send_message({"receive_id": "ou_1", "msg_type": "text", "content": "{}"})

        assert dict(httpx_mock.get_requests()[0].url.params) == {"receive_id_type": "open_id"}

    def test_send_text_message(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        client.send_text_message("你好", receive_id="ou_1")

        body = _sent_body(httpx_mock)
        assert body["msg_type"] == "text"
        assert json.loads(body["content"]) == {"text": "你好"}

    def test_markdown_without_buttons(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        client.send_markdown_message("**bold**", receive_id="ou_1", title="T")

        body = _sent_body(httpx_mock)
        assert body["msg_type"] == "post"
        content = json.loads(body["content"])
        assert content["zh_cn"]["content"] == [[{"tag": "md", "text": "**bold**"}]]

    def test_markdown_with_buttons(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        client.send_markdown_message(
            "release notes",
            receive_id="oc_1",
            receive_id_type="chat_id",
            title="v1.2",
            buttons={"Changelog": "https://example.com/changelog"},
        )

        body = _sent_body(httpx_mock)
        assert body["msg_type"] == "interactive"
        card = json.loads(body["content"])
        assert card["elements"][0] == {"tag": "markdown", "content": "release notes"}
        assert card["elements"][1]["actions"][0]["url"] == "https://example.com/changelog"
        assert dict(httpx_mock.get_requests()[0].url.params) == {"receive_id_type": "chat_id"}


class TestReplyAndRecall:
    """Tests for reply_message and recall_message."""

    def test_reply_message(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0, "data": {"message_id": "om_2"}})

        client.reply_message("om_1", "text", {"text": "ack"}, reply_in_thread=True)

        request = httpx_mock.get_requests()[0]
        assert request.url.path.endswith("/im/v1/messages/om_1/reply")
        body = json.loads(request.content)
        assert body == {
            "msg_type": "text",
            "content": json.dumps({"text": "ack"}),
            "reply_in_thread": True,
        }

    def test_recall_message(self, client, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"code": 0})

        assert client.recall_message("om_1").success

        request = httpx_mock.get_requests()[0]
        assert request.method == "DELETE"
        assert request.url.path.endswith("/im/v1/messages/om_1")
