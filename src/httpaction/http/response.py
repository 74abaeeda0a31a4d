"""
=============================================================================
RESPONSE BUILDER
=============================================================================

The outbound side of an action: a mutable accumulator that filters,
respond() and the helpers write into, and the finalized HTTPResponse
handed back to the server.

=============================================================================
RESPONSE LIFECYCLE
=============================================================================

    Action.dispatch()         ResponseBuilder            finish()
    ───────────────           ───────────────            ────────
    set_default_headers  ──►  headers["Content-Type"]
    before filters       ──►  write() / status           ──►  HTTPResponse(
    respond()            ──►  write() / status                  status,
    after filters        ──►  headers                           headers + Content-Length,
                                                                body=[chunks])

=============================================================================
THE "EMPTY" SENTINEL
=============================================================================

An action asks ``response.is_empty`` to decide whether anybody has
answered the request yet. A response is empty until either:

    - a chunk is written (even an empty string: respond_with() relies on
      this to mark a body-less response as handled), or
    - a status is set explicitly.

Headers never count: the default Content-Type is set on every request
and a filter adding headers has not answered anything.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .status_codes import HTTPStatus, reason_phrase, status_has_body


Chunk = Union[str, bytes]


def _to_bytes(chunk: Chunk) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


@dataclass
class HTTPResponse:
    """
    A finalized response, ready to be sent by the server.

    The body is kept as the ordered list of chunks that were written;
    Content-Length always matches their total size.
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: List[bytes] = field(default_factory=list)
    version: str = "HTTP/1.1"

    @property
    def content_length(self) -> int:
        return sum(len(chunk) for chunk in self.body)

    @property
    def text(self) -> str:
        """The whole body decoded as UTF-8."""
        return b"".join(self.body).decode("utf-8")

    @property
    def status_line(self) -> str:
        """
        The HTTP status line, e.g. "HTTP/1.1 302 Found".

        Works for any integer status, not only HTTPStatus members.
        """
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    def __getitem__(self, name: str) -> str:
        return self.headers[name]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.body)

    def to_bytes(self) -> bytes:
        """
        Serialize to the raw HTTP/1.1 wire format.

        Useful for servers working directly on sockets; WSGI servers use
        status_line/headers/body instead.
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")
        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + b"".join(self.body)


class ResponseBuilder:
    """
    Mutable response accumulator used by a single action.

    =========================================================================
    USAGE
    =========================================================================

        response = ResponseBuilder()
        response["Content-Type"] = "application/json"
        response.status = 201
        response.write('{"id":1}')
        final = response.finish()      # HTTPResponse

    Header writes are last-write-wins per name. Body chunks keep their
    order.
    =========================================================================
    """

    def __init__(self):
        self._status: int = HTTPStatus.OK
        self._status_set = False
        self.headers: Dict[str, str] = {}
        self.chunks: List[bytes] = []

    @property
    def status(self) -> int:
        return self._status

    @status.setter
    def status(self, value: int) -> None:
        self._status = int(value)
        self._status_set = True

    def __getitem__(self, name: str) -> str:
        return self.headers[name]

    def __setitem__(self, name: str, value: str) -> None:
        self.headers[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self.headers

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)

    @property
    def is_empty(self) -> bool:
        """Check whether nothing has answered the request yet."""
        return not self.chunks and not self._status_set

    def write(self, chunk: Union[Chunk, Iterable[Chunk]]) -> "ResponseBuilder":
        """
        Append to the body.

        Accepts a single str/bytes chunk or a list/tuple of chunks. An
        empty string still counts as a write.
        """
        if isinstance(chunk, (str, bytes, bytearray)):
            self.chunks.append(_to_bytes(chunk))
        else:
            self.chunks.extend(_to_bytes(part) for part in chunk)
        return self

    def finish(self) -> HTTPResponse:
        """
        Build the final HTTPResponse.

        Sets Content-Length from the written chunks. Statuses that cannot
        carry a body (1xx, 204, 304) drop the body along with the
        Content-Type and Content-Length headers.
        """
        headers = dict(self.headers)
        if status_has_body(self._status):
            body = list(self.chunks)
            headers["Content-Length"] = str(sum(len(chunk) for chunk in body))
        else:
            body = []
            headers.pop("Content-Type", None)
            headers.pop("Content-Length", None)
        return HTTPResponse(status=self._status, headers=headers, body=body)
