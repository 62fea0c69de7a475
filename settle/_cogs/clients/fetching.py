"""
Point lookups of resources in the paginated listings of the remote API.

The lookups depend only on a minimal contract of a paginated listing:
a "lister" is called with a continuation token (``None`` for the first page)
and returns one page of records plus the next token (``None`` on the last page).
How the pages are actually fetched (HTTP, SDKs, fakes in tests) is irrelevant.
"""
from typing import Any, AsyncIterator, Awaitable, Callable, Collection, List, \
                   Mapping, NamedTuple, Optional, Sequence

from settle._cogs.clients import api, errors
from settle._cogs.configs import configuration
from settle._cogs.helpers import typedefs

RawRecord = Mapping[str, Any]


class Page(NamedTuple):
    items: Sequence[RawRecord]
    token: Optional[str] = None  # None if this is the last page.


Lister = Callable[[Optional[str]], Awaitable[Page]]
IdGetter = Callable[[RawRecord], Optional[str]]


class DuplicateResourceError(LookupError):
    """ The same identifier is listed more than once (only in the strict mode). """


async def iter_pages(lister: Lister) -> AsyncIterator[Page]:
    """
    Iterate over the pages until the lister reports no further pages.

    Since the pages are requested lazily, the consumer can stop the iteration
    at any time, and no more pages will be requested from the remote API.
    """
    token: Optional[str] = None
    while True:
        page = await lister(token)
        yield page
        if not page.token:
            break
        token = page.token


def field_getter(key: str) -> IdGetter:
    def get_id(record: RawRecord) -> Optional[str]:
        value = record.get(key)
        return None if value is None else str(value)
    return get_id


async def find_by_id(
        id: str,
        *,
        lister: Lister,
        get_id: IdGetter,
        strict: bool = False,
) -> RawRecord:
    """
    Find the first record with the specified id in all pages of the listing.

    The first match wins: the following pages are not even requested.
    In the strict mode, all pages are scanned to ensure that the id is unique,
    and :class:`DuplicateResourceError` is raised if it is not.

    If nothing is found, :class:`errors.NotFoundError` is raised: the absence
    is a classified outcome rather than a ``None`` result.
    """
    found: List[RawRecord] = []
    async for page in iter_pages(lister):
        found.extend(record for record in page.items if get_id(record) == id)
        if found and not strict:
            break
        if len(found) > 1:
            raise DuplicateResourceError(f"Resource {id!r} is listed {len(found)}+ times.")
    if not found:
        raise errors.NotFoundError(f"Resource {id!r} is not found.")
    return found[0]


def http_lister(
        url: str,
        *,
        items_key: str,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        ids: Optional[Collection[str]] = None,
        ids_param: Optional[str] = None,
        token_key: str = 'NextToken',
        token_param: Optional[str] = None,
        params: Optional[Mapping[str, str]] = None,
) -> Lister:
    """
    A lister of one JSON endpoint: ``{items_key: [...], token_key: "..."}``.

    If the ids are given, the listing is narrowed with a query parameter
    (if the API supports it; if not, all records are listed and filtered
    by the finder on the client side).
    """
    async def list_page(token: Optional[str]) -> Page:
        query = dict(params or {})
        if ids and ids_param:
            query[ids_param] = ','.join(ids)
        if token:
            query[token_param or token_key] = token
        rsp = await api.get(url, params=query, context=context, settings=settings, logger=logger)
        items = rsp.get(items_key) or []
        return Page(items=items, token=rsp.get(token_key) or None)
    return list_page
