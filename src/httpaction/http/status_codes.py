"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes used by actions and their reason phrases.

An action may set any integer status (``respond_with(299)`` is legal), so
everything here accepts plain ints as well as ``HTTPStatus`` members:

    ┌──────────┬───────────────────────────────────────────────────────────┐
    │  Range   │ Meaning                                                   │
    ├──────────┼───────────────────────────────────────────────────────────┤
    │  1xx     │ Informational - never produced by an action               │
    │  2xx     │ Success - 200 is the default of every response            │
    │  3xx     │ Redirection - redirect_to() uses 302                      │
    │  4xx     │ Client error - not_found() 404, forbidden() 403           │
    │  5xx     │ Server error - left to the surrounding server             │
    └──────────┴───────────────────────────────────────────────────────────┘

Responses with 1xx, 204 and 304 status never carry a body (RFC 7230 3.3.3);
``ResponseBuilder.finish()`` relies on ``status_has_body()`` for that.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.FOUND == 302
        True
        >>> HTTPStatus.FOUND.phrase
        'Found'
    """

    # 2xx SUCCESS
    OK = 200                    # default of every response
    CREATED = 201
    NO_CONTENT = 204            # no body, see status_has_body()

    # 3xx REDIRECTION
    FOUND = 302                 # redirect_to()
    NOT_MODIFIED = 304          # no body, see status_has_body()

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400           # MalformedBodyError.status_code
    FORBIDDEN = 403             # forbidden()
    NOT_FOUND = 404             # not_found()
    UNPROCESSABLE_ENTITY = 422

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line (``HTTP/1.1 404 Not Found``)."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
}


def reason_phrase(status: int) -> str:
    """
    Get the reason phrase for any integer status.

    Codes outside ``HTTPStatus`` get "Unknown", which is still a valid
    status line per RFC 7230 (the phrase is informational only).
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"


def status_has_body(status: int) -> bool:
    """Check whether a response with this status may carry a body."""
    return not (100 <= status < 200 or status in (204, 304))
