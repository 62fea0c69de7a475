import aiohttp.web
import pytest

from settle._cogs.clients.errors import APIServerError
from settle._cogs.structs.states import ELEMENT_NOT_FOUND, NOT_FOUND
from settle._core.actions.waiting import UnexpectedStateError, WaitTimeoutError, \
                                         WaitTransportError
from settle._kits import filesystems


def fs(lifecycle='AVAILABLE', aliases=None, actions=None):
    record = {'FileSystemId': 'fs-1', 'Lifecycle': lifecycle}
    if aliases is not None:
        record['WindowsConfiguration'] = {'Aliases': aliases}
    if actions is not None:
        record['AdministrativeActions'] = actions
    return record


def alias(name, lifecycle):
    return {'Name': name, 'Lifecycle': lifecycle}


def action(status, type='FILE_SYSTEM_UPDATE'):
    return {'AdministrativeActionType': type, 'Status': status}


@pytest.fixture()
def feed(listing):
    def feed_fn(*pages):
        listing('/file-systems', 'FileSystems', *pages)
    feed_fn.queries = listing.queries
    return feed_fn


async def test_file_system_available(feed, context, fast_settings):
    feed([fs('CREATING')], [fs('UPDATING')], [fs('AVAILABLE')])
    result = await filesystems.file_system_available('fs-1', context=context, settings=fast_settings)
    assert result == fs('AVAILABLE')
    assert feed.queries == [{'FileSystemIds': 'fs-1'}] * 3


async def test_file_system_available_ignores_other_file_systems(feed, context, fast_settings):
    other = dict(fs('FAILED'), FileSystemId='fs-2')
    feed([other, fs('CREATING')], [other, fs('AVAILABLE')])
    result = await filesystems.file_system_available('fs-1', context=context, settings=fast_settings)
    assert result == fs('AVAILABLE')


async def test_file_system_available_fails_on_failed(feed, context, fast_settings):
    feed([fs('CREATING')], [fs('FAILED')])
    with pytest.raises(UnexpectedStateError) as err:
        await filesystems.file_system_available('fs-1', context=context, settings=fast_settings)
    assert err.value.label == 'FAILED'
    assert err.value.snapshot == fs('FAILED')


async def test_file_system_available_fails_on_absence(feed, context, fast_settings):
    feed([])
    with pytest.raises(UnexpectedStateError) as err:
        await filesystems.file_system_available('fs-1', context=context, settings=fast_settings)
    assert err.value.label == NOT_FOUND


async def test_file_system_available_fails_on_server_errors(feed, context, fast_settings):
    feed([fs('CREATING')], aiohttp.web.json_response({'message': 'oops'}, status=500))
    with pytest.raises(WaitTransportError) as err:
        await filesystems.file_system_available('fs-1', context=context, settings=fast_settings)
    assert isinstance(err.value.__cause__, APIServerError)
    assert err.value.label == 'CREATING'
    assert err.value.snapshot == fs('CREATING')


async def test_file_system_deleted_by_absence(feed, context, fast_settings):
    feed([fs('AVAILABLE')], [fs('DELETING')], [])
    result = await filesystems.file_system_deleted('fs-1', context=context, settings=fast_settings)
    assert result is None


async def test_file_system_deleted_by_not_found_error(feed, context, fast_settings):
    feed([fs('DELETING')], aiohttp.web.json_response({'__type': 'FileSystemNotFound'}, status=400))
    result = await filesystems.file_system_deleted('fs-1', context=context, settings=fast_settings)
    assert result is None


async def test_alias_available_returns_the_alias(feed, context, fast_settings):
    feed(
        [fs(aliases=[])],
        [fs(aliases=[alias('a1', 'CREATING')])],
        [fs(aliases=[alias('a2', 'CREATING'), alias('a1', 'AVAILABLE')])],
    )
    result = await filesystems.alias_available('fs-1', 'a1', context=context, settings=fast_settings)
    assert result == alias('a1', 'AVAILABLE')


async def test_alias_never_appears_times_out_with_parent(feed, context, fast_settings):
    fast_settings.filesystems.alias_delay = 10  # so that only one probe fits
    feed([fs(aliases=[alias('a2', 'AVAILABLE')])])
    with pytest.raises(WaitTimeoutError) as err:
        await filesystems.alias_available('fs-1', 'a1', timeout=0.5,
                                          context=context, settings=fast_settings)
    assert err.value.label == ELEMENT_NOT_FOUND
    assert err.value.snapshot == fs(aliases=[alias('a2', 'AVAILABLE')])


async def test_alias_available_fails_if_file_system_is_gone(feed, context, fast_settings):
    fast_settings.filesystems.alias_delay = 10
    feed(aiohttp.web.json_response({'__type': 'FileSystemNotFound'}, status=400))
    with pytest.raises(UnexpectedStateError) as err:
        await filesystems.alias_available('fs-1', 'a1', timeout=60,
                                          context=context, settings=fast_settings)
    assert err.value.label == NOT_FOUND
    assert err.value.snapshot is None
    assert len(feed.queries) == 1


async def test_alias_available_fails_when_file_system_disappears(feed, context, fast_settings):
    feed([fs(aliases=[alias('a1', 'CREATING')])], [])
    with pytest.raises(UnexpectedStateError) as err:
        await filesystems.alias_available('fs-1', 'a1', context=context, settings=fast_settings)
    assert err.value.label == NOT_FOUND
    assert len(feed.queries) == 2


async def test_alias_deleted_returns_the_parent(feed, context, fast_settings):
    feed(
        [fs(aliases=[alias('a1', 'DELETING'), alias('a2', 'AVAILABLE')])],
        [fs(aliases=[alias('a2', 'AVAILABLE')])],
    )
    result = await filesystems.alias_deleted('fs-1', 'a1', context=context, settings=fast_settings)
    assert result == fs(aliases=[alias('a2', 'AVAILABLE')])


async def test_alias_deleted_together_with_file_system(feed, context, fast_settings):
    feed(
        [fs(aliases=[alias('a1', 'DELETING')])],
        aiohttp.web.json_response({'__type': 'FileSystemNotFound'}, status=400),
    )
    result = await filesystems.alias_deleted('fs-1', 'a1', context=context, settings=fast_settings)
    assert result is None


async def test_aliases_available_in_order(feed, context, fast_settings):
    feed(*[[fs(aliases=[alias('a1', 'AVAILABLE'), alias('a2', 'AVAILABLE')])]] * 2)
    result = await filesystems.aliases_available('fs-1', ['a2', 'a1'],
                                                 context=context, settings=fast_settings)
    assert result == [alias('a2', 'AVAILABLE'), alias('a1', 'AVAILABLE')]


@pytest.mark.parametrize('status', ['COMPLETED', 'UPDATED_OPTIMIZING'])
async def test_actions_completed(feed, context, fast_settings, status):
    feed(
        [fs(actions=[action('PENDING')])],
        [fs(actions=[action('IN_PROGRESS')])],
        [fs(actions=[action(status)])],
    )
    result = await filesystems.administrative_actions_completed_or_optimizing(
        'fs-1', context=context, settings=fast_settings)
    assert result == fs(actions=[action(status)])


async def test_actions_completed_when_no_actions(feed, context, fast_settings):
    feed([fs(actions=[action('IN_PROGRESS', type='BACKUP')])])
    result = await filesystems.administrative_actions_completed_or_optimizing(
        'fs-1', context=context, settings=fast_settings)
    assert result == fs(actions=[action('IN_PROGRESS', type='BACKUP')])


async def test_actions_failed(feed, context, fast_settings):
    feed([fs(actions=[action('FAILED')])])
    with pytest.raises(UnexpectedStateError) as err:
        await filesystems.administrative_actions_completed_or_optimizing(
            'fs-1', context=context, settings=fast_settings)
    assert err.value.label == 'FAILED'


def test_find_alias():
    record = fs(aliases=[alias('a1', 'CREATING'), alias('a2', 'AVAILABLE')])
    assert filesystems.find_alias(record, 'a2') == alias('a2', 'AVAILABLE')
    assert filesystems.find_alias(record, 'a3') is None
    assert filesystems.find_alias(fs(), 'a1') is None


def test_settings_defaults(settings):
    assert settings.filesystems.available_delay == 30
    assert settings.filesystems.create_timeout == 45 * 60
    assert settings.filesystems.delete_timeout == 30 * 60
    assert settings.filesystems.alias_available_timeout == 5 * 60
