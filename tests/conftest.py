import logging

import pytest


def by_slow_marker(item):
    # Check if test is marked as slow
    is_slow = 0 if item.get_closest_marker("slow") is None else 1

    # Check if test is integration test
    is_integration = 1 if "integration" in str(item.fspath) else 0

    # Unit tests first, then slow unit tests, then integration tests
    return (is_integration, is_slow)


def pytest_addoption(parser):
    parser.addoption("--slow-last", action="store_true", default=False)


def pytest_collection_modifyitems(items, config):
    if config.getoption("--slow-last"):
        items.sort(key=by_slow_marker)


@pytest.fixture(autouse=True)
def configure_logging_for_tests(caplog):
    """Let caplog see Taskboard log records.

    ``setup_logger`` turns propagation off for the ``taskboard`` logger; turn it
    back on for the duration of each test.
    """
    caplog.set_level(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)

    taskboard_logger = logging.getLogger("taskboard")
    original_propagate = taskboard_logger.propagate
    taskboard_logger.propagate = True

    yield

    root_logger.setLevel(original_level)
    taskboard_logger.propagate = original_propagate
