"""Builders for markdown post and interactive card payloads."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


class CardBuilder:
    """Fluent builder for interactive card JSON (v1.0 layout).

    Example:
        ```python
        card = (
            CardBuilder()
            .set_header("Deploy finished")
            .add_markdown("**main** is live")
            .add_buttons({"Open": "https://example.com"})
            .build()
        )
        ```
    """

    def __init__(self) -> None:
        self.card: dict[str, Any] = {"elements": []}

    def set_header(self, title: str, template: str | None = None) -> CardBuilder:
        """Set card header with a plain-text title."""
        header: dict[str, Any] = {"title": {"content": title, "tag": "plain_text"}}
        if template:
            header["template"] = template
        self.card["header"] = header
        return self

    def add_markdown(self, content: str) -> CardBuilder:
        """Add a markdown element."""
        self.card["elements"].append({"tag": "markdown", "content": content})
        return self

    def add_buttons(
        self, buttons: Mapping[str, str], button_type: str = "primary"
    ) -> CardBuilder:
        """Add one action element holding a link button per ``label -> url`` entry."""
        if not buttons:
            return self
        actions = [
            {
                "tag": "button",
                "text": {"tag": "plain_text", "content": str(label)},
                "type": button_type,
                "url": url,
            }
            for label, url in buttons.items()
        ]
        self.card["elements"].append({"tag": "action", "actions": actions})
        return self

    def build(self) -> dict[str, Any]:
        return self.card


def build_markdown_post(markdown: str, title: str = "", language: str = "zh_cn") -> dict[str, Any]:
    """Rich-text ``post`` content with a single markdown paragraph."""
    return {
        language: {
            "title": title,
            "content": [[{"tag": "md", "text": markdown}]],
        }
    }


def build_markdown_card(
    markdown: str,
    title: str = "",
    buttons: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Interactive card with a markdown body, a title header and optional link buttons."""
    return (
        CardBuilder()
        .add_markdown(markdown)
        .set_header(title)
        .add_buttons(buttons or {})
        .build()
    )


def build_markdown_message(
    receive_id: str,
    markdown: str,
    title: str = "",
    buttons: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Message body for ``send_message``.

    Without buttons this is a ``post`` message; with buttons it becomes an
    ``interactive`` card so the buttons can be rendered.
    """
    if buttons:
        msg_type = "interactive"
        content = build_markdown_card(markdown, title=title, buttons=buttons)
    else:
        msg_type = "post"
        content = build_markdown_post(markdown, title=title)
    return {
        "receive_id": receive_id,
        "msg_type": msg_type,
        "content": json.dumps(content, ensure_ascii=False),
    }
