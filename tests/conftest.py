import logging
import re

import pytest

from settle._cogs.clients.api import APIContext
from settle._cogs.configs.configuration import Settings


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def fast_settings(settings):
    """ Settings with no sleeping between the probes, for tests with real I/O. """
    settings.waiting.delay = 0
    settings.filesystems.available_delay = 0
    settings.filesystems.deleted_delay = 0
    settings.filesystems.actions_delay = 0
    settings.filesystems.alias_delay = 0
    settings.vpnendpoints.deleted_delay = 0
    return settings


@pytest.fixture()
def logger():
    return logging.getLogger('settle.tests')


@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
async def context(aresponses, hostname):
    """ An API context pointing to the fake server of `aresponses`. """
    async with APIContext(f'https://{hostname}') as context:
        yield context


@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    def assert_logs_fn(patterns, prohibited=()):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # Looking-ahead: if one of the following patterns matches, while the
            # first one does not, then the log message is missing: fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                if re.search(pattern, message):
                    if idx > 0:
                        raise AssertionError(f"Few patterns were skipped: {remaining_patterns[:idx]!r}")
                    remaining_patterns[:1] = []
                    break
            for pattern in prohibited:
                if re.search(pattern, message):
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")
    return assert_logs_fn


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)
