import aiohttp.web
import pytest


@pytest.fixture()
def listing(aresponses, hostname):
    """
    Serve the listings of resources, one response per request, in order.

    Every listed page is a mapping ``{items_key: [records...]}``. The requests'
    query parameters are remembered for assertions.
    """
    queries = []

    def feed(path, items_key, *pages):
        for page in pages:
            async def handler(request, page=page):
                queries.append(dict(request.query))
                if isinstance(page, aiohttp.web.Response):
                    return page
                return aiohttp.web.json_response({items_key: page})
            aresponses.add(hostname, path, 'get', handler)

    feed.queries = queries
    return feed
