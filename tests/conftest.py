import pytest

from fakes import FakeDirectory, InMemoryRepository, RecordingNotifier

PASSWORD = "hackbot-secret"


@pytest.fixture()
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
