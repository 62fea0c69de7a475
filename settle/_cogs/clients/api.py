"""
A thin aiohttp-based layer for reading from the remote API.

Nothing here manages the credentials or retries the requests: the session
is given by the caller fully prepared (headers, auth, SSL), and every failed
request is escalated to the caller as is. The retry policy, if any,
belongs to the callers, not to the reading layer.
"""
from typing import Any, Mapping, Optional

import aiohttp

from settle._cogs.clients import errors
from settle._cogs.configs import configuration
from settle._cogs.helpers import typedefs, versions


class APIContext:
    """
    A container for an aiohttp session and the server's base URL.

    The session is shared by all the probes & waiters that use this context,
    including the concurrently running ones: aiohttp sessions are safe
    for concurrent use within the same event loop.
    """

    # The main contained object used by the API methods.
    session: aiohttp.ClientSession

    # Contextual information for URL building.
    server: str

    def __init__(
            self,
            server: str,
            *,
            session: Optional[aiohttp.ClientSession] = None,
            headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__()
        self.server = server
        self.session = session if session is not None else aiohttp.ClientSession(headers=headers)

        # It is a good practice to self-identify a bit, even with a user-provided session.
        if self.session.headers.get('User-Agent') is None:
            self.session.headers['User-Agent'] = f'settle/{versions.version or "unknown"}'

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


async def request(
        method: str,
        url: str,  # relative to the server/api root.
        *,
        context: APIContext,
        settings: configuration.Settings,
        params: Optional[Mapping[str, str]] = None,
        logger: typedefs.Logger,
) -> aiohttp.ClientResponse:

    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    timeout = aiohttp.ClientTimeout(
        total=settings.networking.request_timeout,
        sock_connect=settings.networking.connect_timeout,
    )

    what = f"{method.upper()} {url}"
    logger.debug(f"Requesting: {what}")
    response = await context.session.request(
        method=method,
        url=url,
        params=params,
        timeout=timeout,
    )
    await errors.check_response(response)  # but do not parse it!
    return response


async def get(
        url: str,  # relative to the server/api root.
        *,
        context: APIContext,
        settings: configuration.Settings,
        params: Optional[Mapping[str, str]] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='get',
        url=url,
        params=params,
        context=context,
        settings=settings,
        logger=logger,
    )
    async with response:
        return await response.json(content_type=None)
