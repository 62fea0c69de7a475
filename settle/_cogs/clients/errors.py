"""
Remote API errors.

The underlying client library (now, ``aiohttp``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code in the library.
Hence, we have our own hierarchy of exceptions for the API errors.

Low-level errors, such as the network connectivity issues, SSL/HTTPS issues,
etc, are escalated from the client library as is, since they are related not
to the domain of the resource-management API, but rather to the networking.

The original errors of the client library are chained as the causes of our own
specialised errors -- for better explainability of errors in the stack traces.

The absence of a resource is special: it is not a failure in most cases,
but a meaningful state of a resource (e.g. when awaiting for its deletion).
Therefore, all kinds of absence share the same base class regardless of
whether it was reported by the API server or detected by the client side.
"""
import collections.abc
import json
from typing import Optional

import aiohttp
from typing_extensions import TypedDict


# The functional syntax: "__type" (AWS-style JSON protocols) would be name-mangled in a class.
RawErrorPayload = TypedDict('RawErrorPayload', {
    '__type': str,
    'code': str,
    'message': str,
    'Message': str,
}, total=False)


class NotFoundError(LookupError):
    """ A resource is absent: either as reported by the API, or as not listed. """


class APIError(Exception):

    def __init__(
            self,
            payload: Optional[RawErrorPayload],
            *,
            status: int,
    ) -> None:
        message = _get_message(payload)
        super().__init__(message, payload)
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[str]:
        return _get_code(self._payload)

    @property
    def message(self) -> Optional[str]:
        return _get_message(self._payload)


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError, NotFoundError):
    pass


class APIConflictError(APIError):
    pass


class APIServerError(APIError):
    pass


def _get_code(payload: Optional[RawErrorPayload]) -> Optional[str]:
    if not payload:
        return None
    code = payload.get('code') or payload.get('__type')
    # AWS prefixes the codes with a namespace sometimes: "com.amazonaws...#FileSystemNotFound".
    return str(code).rsplit('#', 1)[-1] if code else None


def _get_message(payload: Optional[RawErrorPayload]) -> Optional[str]:
    if not payload:
        return None
    return payload.get('message') or payload.get('Message')


def is_not_found_code(code: Optional[str]) -> bool:
    """
    Detect the absence-reporting error codes of AWS-like APIs.

    E.g.: ``FileSystemNotFound`` or ``InvalidClientVpnEndpointId.NotFound``.
    """
    return code is not None and code.endswith('NotFound')


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised API errors, and raise with extended information.
    """
    if response.status >= 400:

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[RawErrorPayload]
        try:
            payload = await response.json(content_type=None)
        except (json.JSONDecodeError, aiohttp.ContentTypeError, aiohttp.ClientConnectionError):
            payload = None

        if not isinstance(payload, collections.abc.Mapping):
            payload = None

        cls = (
            APINotFoundError if is_not_found_code(_get_code(payload)) else
            APIUnauthorizedError if response.status == 401 else
            APIForbiddenError if response.status == 403 else
            APINotFoundError if response.status == 404 else
            APIConflictError if response.status == 409 else
            APIServerError if response.status >= 500 else
            APIError
        )

        # Raise the library-specific error while keeping the original error in scope.
        # This call also closes the response's body, so it cannot be read afterwards.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e

