import pytest

from settle._cogs.structs.states import Reading


@pytest.fixture()
def probe(mocker):
    """
    A probe with the readings to be configured by the tests.

    The labels are given as strings, and the snapshots are made from them,
    so that it could be checked which reading was the last one seen.
    """
    mock = mocker.AsyncMock()

    def feed(*labels):
        mock.side_effect = [
            label if isinstance(label, Reading) else
            Reading({'n': idx, 'state': label}, label)
            for idx, label in enumerate(labels)
        ]
    mock.feed = feed
    return mock
