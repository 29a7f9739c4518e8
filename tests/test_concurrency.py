"""Tests for bounded fan-out."""

import threading
import time

from s3_folder_api.objectstorage.concurrency import fan_out


class TestFanOut:
    """Test fan_out scheduling and failure handling."""

    def test_empty_items(self):
        result = fan_out([], lambda item: item, max_workers=4)

        assert result.ok
        assert result.completed == []

    def test_all_items_complete_in_item_order(self):
        result = fan_out([3, 1, 2], lambda item: item * 10, max_workers=3)

        assert result.ok
        assert result.completed == [(3, 30), (1, 10), (2, 20)]
        assert result.skipped == []

    def test_concurrency_is_capped(self):
        """No more than max_workers tasks run at the same time."""
        lock = threading.Lock()
        running = 0
        peak = 0

        def task(item):
            nonlocal running, peak
            with lock:
                running += 1
                peak = max(peak, running)
            time.sleep(0.01)
            with lock:
                running -= 1
            return item

        result = fan_out(list(range(20)), task, max_workers=3)

        assert result.ok
        assert len(result.completed) == 20
        assert peak <= 3

    def test_first_failure_skips_remaining(self):
        """With one worker the order is deterministic."""
        started = []

        def task(item):
            started.append(item)
            if item == 2:
                raise ValueError("boom")
            return item

        result = fan_out([0, 1, 2, 3, 4], task, max_workers=1)

        assert not result.ok
        assert isinstance(result.error, ValueError)
        assert result.failed_item == 2
        assert [item for item, _ in result.completed] == [0, 1]
        assert sorted(result.skipped) == [3, 4]
        assert started == [0, 1, 2]

    def test_running_tasks_finish_after_failure(self):
        """A task already in flight completes even though another failed."""
        started = threading.Event()
        release = threading.Event()

        def task(item):
            if item == "slow":
                started.set()
                release.wait(timeout=5)
                return item
            started.wait(timeout=5)
            release.set()
            raise RuntimeError("fast failure")

        result = fan_out(["slow", "fail"], task, max_workers=2)

        assert result.failed_item == "fail"
        assert result.completed == [("slow", "slow")]
