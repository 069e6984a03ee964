from collections.abc import Callable, Collection

import httpx
import pytest


def pytest_addoption(parser):
    parser.addoption(
        '--extended',
        action='store_true',
        default=False,
        help='run extended tests',
    )


def pytest_configure(config):
    config.addinivalue_line('markers', 'extended: mark test as part of the extended test suite')


def pytest_collection_modifyitems(config: pytest.Config, items: Collection[pytest.Item]):
    # extended tests talk to the live services, skip them by default
    if not config.getoption('--extended'):
        skip_marker = pytest.mark.skip(reason='need --extended option to run')
        for item in items:
            if 'extended' in item.keywords:
                item.add_marker(skip_marker)


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Create an HTTP client answering requests with the given handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return factory
