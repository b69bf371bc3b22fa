"""Message exchange carried through the host pipeline."""

import uuid
from typing import Any, Dict, Optional


class Message:
    """A message with a header mapping and a body.

    Header names are case sensitive. Headers hold values of any type.

    Example:
        >>> message = Message({"HazelcastObjectId": "k1"}, body="v1")
        >>> message.get_header("HazelcastObjectId")
        'k1'
    """

    def __init__(self, headers: Optional[Dict[str, Any]] = None, body: Any = None):
        self._headers: Dict[str, Any] = dict(headers) if headers else {}
        self._body = body

    @property
    def headers(self) -> Dict[str, Any]:
        return self._headers

    @headers.setter
    def headers(self, value: Dict[str, Any]) -> None:
        self._headers = dict(value)

    @property
    def body(self) -> Any:
        return self._body

    @body.setter
    def body(self, value: Any) -> None:
        self._body = value

    def has_header(self, name: str) -> bool:
        return name in self._headers

    def get_header(self, name: str, default: Any = None) -> Any:
        return self._headers.get(name, default)

    def set_header(self, name: str, value: Any) -> None:
        self._headers[name] = value

    def remove_header(self, name: str) -> Any:
        """Remove a header and return its value, or None if it was absent."""
        return self._headers.pop(name, None)

    def __repr__(self) -> str:
        return f"Message(headers={self._headers!r}, body={self._body!r})"


class Exchange:
    """Per-message carrier with an inbound and an outbound message.

    The inbound message is provided by the host. The outbound message is
    created on first access through :meth:`get_out`, so consumers can tell
    with :meth:`has_out` whether a stage wrote a reply.

    Attributes:
        exchange_id: Unique identifier of this exchange.
        in_message: The inbound message.
    """

    def __init__(
        self,
        in_message: Optional[Message] = None,
        exchange_id: Optional[str] = None,
    ):
        self._exchange_id = exchange_id or str(uuid.uuid4())
        self._in = in_message if in_message is not None else Message()
        self._out: Optional[Message] = None

    @classmethod
    def create(cls, headers: Optional[Dict[str, Any]] = None, body: Any = None) -> "Exchange":
        """Create an exchange whose inbound message has the given headers and body."""
        return cls(Message(headers, body))

    @property
    def exchange_id(self) -> str:
        return self._exchange_id

    @property
    def in_message(self) -> Message:
        return self._in

    @property
    def out_message(self) -> Optional[Message]:
        """Get the outbound message, or None if it has not been created."""
        return self._out

    def get_in(self) -> Message:
        return self._in

    def get_out(self) -> Message:
        """Get the outbound message, creating an empty one if needed."""
        if self._out is None:
            self._out = Message()
        return self._out

    def has_out(self) -> bool:
        return self._out is not None

    def __repr__(self) -> str:
        return f"Exchange(id={self._exchange_id!r}, in={self._in!r}, out={self._out!r})"
