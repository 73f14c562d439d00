"""Chat message contract and validation.

Architectural role:
    Defines the normalized message shape consumed by the orchestrator and
    validates raw JSON request bodies into it.

Message shape:
    `ChatMessage.content` is always a list of content parts:
        - `{"type": "text", "text": str}`
        - `{"type": "image_url", "image_url": str | {"url": str, "detail": str}}`
    A plain string `content` is normalized to one text part.

Failure handling:
    Every validation failure raises `InvalidChatMessagesError` whose detail
    names the offending message/part index.
"""

from dataclasses import dataclass, field

from vibe.errors import InvalidChatMessagesError


@dataclass
class ChatMessage:
    """One chat turn in content-part form."""

    role: str
    content: list = field(default_factory=list)

    def text(self) -> str:
        """Join all text parts with a single space."""
        return " ".join(
            str(part.get("text", "")) for part in self.content if part.get("type") == "text"
        )

    def image_urls(self) -> list:
        """Return the URLs of all `image_url` parts."""
        urls = []
        for part in self.content:
            if part.get("type") != "image_url":
                continue
            image_url = part.get("image_url")
            url = image_url.get("url") if isinstance(image_url, dict) else image_url
            if isinstance(url, str) and url:
                urls.append(url)
        return urls


_MISSING = object()


def _traverse_path(data, path):
    current = data
    for key in path:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return _MISSING
    return current


def parse_chat_messages(data, path=None) -> list:
    """Validate raw input into a list of `ChatMessage`.

    Args:
        data: Decoded JSON: one message, a list of messages, or an object
            holding them at `path`.
        path: Optional key path to the messages (for example `["messages"]`).

    Returns:
        Non-empty list of `ChatMessage`.

    Raises:
        InvalidChatMessagesError: Path missing, no messages, or a malformed
            message/content part.
    """
    target = data
    if path:
        target = _traverse_path(data, path)
        if target is _MISSING:
            raise InvalidChatMessagesError(
                f"Could not resolve path {' -> '.join(path)} on the input object."
            )

    items = target if isinstance(target, list) else [target]
    if not items:
        raise InvalidChatMessagesError("Input does not contain any chat messages.")

    messages = []
    for i, msg in enumerate(items):
        if not isinstance(msg, dict):
            raise InvalidChatMessagesError(f"Message at index {i} is not a valid object.")

        if not isinstance(msg.get("role"), str):
            raise InvalidChatMessagesError(
                f"Message at index {i} is missing a valid 'role' property."
            )

        if "content" not in msg:
            raise InvalidChatMessagesError(
                f"Message at index {i} is missing the 'content' property."
            )

        content = msg["content"]
        if isinstance(content, str):
            parts = [{"type": "text", "text": content}]
        elif isinstance(content, list):
            for j, part in enumerate(content):
                if not isinstance(part, dict):
                    raise InvalidChatMessagesError(
                        f"Content at index {j} in message {i} is not a valid object."
                    )
                if not isinstance(part.get("type"), str):
                    raise InvalidChatMessagesError(
                        f"Content at index {j} in message {i} is missing a valid 'type' property."
                    )
            parts = list(content)
        else:
            raise InvalidChatMessagesError(f"Message at index {i} has an invalid 'content' type.")

        messages.append(ChatMessage(role=msg["role"], content=parts))

    return messages
