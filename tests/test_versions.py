import json

import pytest

from settle._cogs.clients.api import APIContext, get


def test_package_version():
    import settle
    assert hasattr(settle, '__version__')


@pytest.mark.parametrize('version, useragent', [
    ('1.2.3', 'settle/1.2.3'),
    ('1.2rc', 'settle/1.2rc'),
    (None, 'settle/unknown'),
])
async def test_http_user_agent_version(
        aresponses, hostname, settings, logger, mocker, version, useragent):

    mocker.patch('settle._cogs.helpers.versions.version', version)

    async def responder(request):
        return aresponses.Response(
            content_type='application/json',
            text=json.dumps(dict(request.headers)))

    aresponses.add(hostname, '/', 'get', responder)
    async with APIContext(f'https://{hostname}') as context:
        returned_headers = await get('/', context=context, settings=settings, logger=logger)
    assert returned_headers['User-Agent'] == useragent


async def test_http_user_agent_is_kept_if_provided(aresponses, hostname, settings, logger):

    async def responder(request):
        return aresponses.Response(
            content_type='application/json',
            text=json.dumps(dict(request.headers)))

    aresponses.add(hostname, '/', 'get', responder)
    async with APIContext(f'https://{hostname}', headers={'User-Agent': 'mine/1.0'}) as context:
        returned_headers = await get('/', context=context, settings=settings, logger=logger)
    assert returned_headers['User-Agent'] == 'mine/1.0'
