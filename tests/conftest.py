import os
import threading
from contextlib import contextmanager
from pathlib import Path
from unittest import mock

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported and initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    from commerce.notifications import reset_notifier

    reset_notifier()

    yield

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_notifier()


@pytest.fixture()
def run_concurrently(commerce_bed):
    """Run each callable in its own thread and domain context; return results or raised exceptions."""

    def run(*calls):
        results = [None] * len(calls)

        def worker(index, call):
            with commerce_bed.domain.domain_context():
                try:
                    results[index] = call()
                except Exception as exc:
                    results[index] = exc

        threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return results

    return run


@pytest.fixture()
def held_after_first_call():
    """Patch ``cls.name`` so every thread, after its first call, waits until all parties made theirs.

    Later calls from the same thread (a retry) pass straight through.
    """

    @contextmanager
    def hold(cls, name, parties=2):
        barrier = threading.Barrier(parties, timeout=10)
        original = getattr(cls, name)
        waited = set()

        def held(*args, **kwargs):
            result = original(*args, **kwargs)
            if threading.get_ident() not in waited:
                waited.add(threading.get_ident())
                barrier.wait()
            return result

        with mock.patch.object(cls, name, held):
            yield

    return hold
