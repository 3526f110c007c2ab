"""
Tests for DisposableBag.

Requires Python 3.11+.
"""

import pytest
import structlog
from structlog.testing import capture_logs

from watcher.disposable import DisposableBag, ObjectDisposedError


class Resource:
    """Fake handle that records when it is closed."""

    def __init__(self, name: str, journal: list[str]) -> None:
        self.name = name
        self._journal = journal

    def close(self) -> None:
        self._journal.append(f"close:{self.name}")


class TestDisposableBag:
    """Test cases for DisposableBag."""

    @pytest.fixture
    def journal(self) -> list[str]:
        return []

    def test_runs_actions_in_order(self, journal: list[str]):
        """Test actions and closeables run in insertion order."""
        bag = DisposableBag("test")
        (
            bag
            .add(lambda: journal.append("timer"))
            .add(Resource("watch", journal))
            .add(lambda: journal.append("unsubscribe"))
        )

        assert len(bag) == 3
        assert bag.try_dispose() is True
        assert journal == ["timer", "close:watch", "unsubscribe"]
        assert len(bag) == 0

    def test_runs_only_once(self, journal: list[str]):
        """Test a second dispose does nothing."""
        bag = DisposableBag("test").add(Resource("watch", journal))

        assert bag.try_dispose() is True
        assert bag.try_dispose() is False
        assert journal == ["close:watch"]
        assert bag.is_disposed

    def test_empty_bag(self):
        """Test disposing an empty bag."""
        bag = DisposableBag("empty")

        assert not bag.is_disposed
        assert bag.try_dispose() is True
        assert bag.is_disposed

    def test_failure_does_not_stop_teardown(self, journal: list[str]):
        """Test a raising action is logged and the rest still run."""
        def broken() -> None:
            raise OSError("handle already closed")

        bag = DisposableBag("PathsWatcher")
        bag.add(broken).add(Resource("watch", journal))

        with capture_logs() as logs:
            assert bag.try_dispose() is True

        assert journal == ["close:watch"]
        assert logs[0]["event"] == "dispose_action_failed"
        assert logs[0]["owner"] == "PathsWatcher"
        assert logs[0]["error"] == "handle already closed"

    def test_failure_goes_to_given_logger(self):
        """Test a logger passed in receives failed actions."""
        def broken() -> None:
            raise OSError("observer gone")

        with capture_logs() as logs:
            log = structlog.get_logger("language_server").bind(session="abc")
            DisposableBag("PathsWatcher", log=log).add(broken).try_dispose()

        assert logs[0]["event"] == "dispose_action_failed"
        assert logs[0]["session"] == "abc"

    def test_add_after_dispose(self, journal: list[str]):
        """Test registering with a disposed bag raises."""
        bag = DisposableBag("PathsWatcher")
        bag.try_dispose()

        with pytest.raises(ObjectDisposedError, match="PathsWatcher is already disposed"):
            bag.add(Resource("late", journal))
        assert journal == []
