"""Message structure definitions."""

from dataclasses import dataclass, field
from typing import List, Union

from protocol.commands import RequestCode, ResponseKind


@dataclass
class Request:
    """A decoded request datagram.

    ``code`` is a RequestCode member, or the raw signed byte value when the
    byte does not name a known code.
    """

    code: Union[RequestCode, int]
    params: List[str] = field(default_factory=list)

    @property
    def is_known(self) -> bool:
        """Whether the code byte names a defined request code."""
        return isinstance(self.code, RequestCode)

    def describe(self) -> str:
        """Render the request for log lines."""
        name = self.code.name if self.is_known else f"Unknown({self.code})"
        if not self.params:
            return f"{name} [No Params]"
        return f"{name}, Params: [{', '.join(self.params)}]"


@dataclass(frozen=True)
class TextPayload:
    """ASCII string response."""

    text: str

    @property
    def kind(self) -> ResponseKind:
        return ResponseKind.TEXT


@dataclass(frozen=True)
class BoundedIntPayload:
    """Unsigned 32-bit integer response."""

    value: int

    @property
    def kind(self) -> ResponseKind:
        return ResponseKind.BOUNDED_INT


@dataclass(frozen=True)
class PongPayload:
    """Single zero byte answering a round-trip measurement."""

    @property
    def kind(self) -> ResponseKind:
        return ResponseKind.PONG


ResponsePayload = Union[TextPayload, BoundedIntPayload, PongPayload]
