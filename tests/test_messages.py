from __future__ import annotations

import pytest

from vibe.core.messages import ChatMessage, parse_chat_messages
from vibe.errors import InvalidChatMessagesError


def _detail(data, path=None) -> str:
    with pytest.raises(InvalidChatMessagesError) as info:
        parse_chat_messages(data, path=path)
    return info.value.detail


def test_string_content_becomes_text_part() -> None:
    messages = parse_chat_messages({"messages": [{"role": "user", "content": "space"}]}, path=["messages"])
    assert messages == [ChatMessage(role="user", content=[{"type": "text", "text": "space"}])]


def test_single_object_is_wrapped() -> None:
    messages = parse_chat_messages({"role": "user", "content": "hi"})
    assert len(messages) == 1


def test_text_and_image_accessors() -> None:
    message = parse_chat_messages(
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "pastel"},
                {"type": "image_url", "image_url": {"url": "https://a/b.png"}},
                {"type": "text", "text": "bakery"},
                {"type": "image_url", "image_url": "data:image/png;base64,AAA"},
            ],
        }
    )[0]

    assert message.text() == "pastel bakery"
    assert message.image_urls() == ["https://a/b.png", "data:image/png;base64,AAA"]


def test_unresolved_path() -> None:
    assert _detail({"msgs": []}, path=["messages"]) == (
        "Could not resolve path messages on the input object."
    )


def test_empty_messages() -> None:
    assert _detail({"messages": []}, path=["messages"]) == "Input does not contain any chat messages."


def test_invalid_message_shapes() -> None:
    assert _detail(["oops"]) == "Message at index 0 is not a valid object."
    assert _detail([{"content": "x"}]) == "Message at index 0 is missing a valid 'role' property."
    assert _detail([{"role": "user"}]) == "Message at index 0 is missing the 'content' property."
    assert _detail([{"role": "user", "content": 5}]) == (
        "Message at index 0 has an invalid 'content' type."
    )


def test_invalid_content_parts() -> None:
    ok = {"role": "user", "content": "fine"}
    assert _detail([ok, {"role": "user", "content": ["x"]}]) == (
        "Content at index 0 in message 1 is not a valid object."
    )
    assert _detail([{"role": "user", "content": [{"type": "text"}, {"text": "y"}]}]) == (
        "Content at index 1 in message 0 is missing a valid 'type' property."
    )


def test_null_messages_resolve_to_invalid_message() -> None:
    assert _detail({"messages": None}, path=["messages"]) == "Message at index 0 is not a valid object."
