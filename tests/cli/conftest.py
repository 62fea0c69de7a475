import functools

import click.testing
import pytest

from settle.cli import main


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture(autouse=True)
def configure(mocker):
    return mocker.patch('settle._core.actions.loggers.configure')


@pytest.fixture()
def mocked_wait(mocker):
    return mocker.patch('settle.cli._wait', return_value={'Id': 'r1', 'State': 'AVAILABLE'})
