"""Task queue tests."""

import asyncio

import pytest

from deskflow import TaskQueue, TaskStatus


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_higher_priority_starts_first():
    queue = TaskQueue(max_concurrent=1)
    started = []

    queue.add(lambda: started.append("A"), priority=1)
    queue.add(lambda: started.append("B"), priority=5)
    await queue.join()

    assert started == ["B", "A"]


@pytest.mark.asyncio
async def test_equal_priority_keeps_submission_order():
    queue = TaskQueue(max_concurrent=1)
    started = []
    for name, priority in [("a", 0), ("b", 2), ("c", 0), ("d", 2), ("e", -1)]:
        queue.add(lambda name=name: started.append(name), priority=priority)
    await queue.join()

    assert started == ["b", "d", "a", "c", "e"]


@pytest.mark.asyncio
async def test_pending_order_is_stable_insertion():
    queue = TaskQueue(max_concurrent=1)
    queue.pause()
    ids = [queue.add(lambda: None, priority=p) for p in (1, 3, 1, 2)]
    assert [t.id for t in queue.get_queue()] == [ids[1], ids[3], ids[0], ids[2]]


@pytest.mark.asyncio
async def test_concurrency_ceiling_is_respected():
    queue = TaskQueue(max_concurrent=2)
    in_flight = 0
    peak = 0

    async def work():
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1

    for priority in range(6):
        queue.add(work, priority=priority)
    await queue.join()

    assert peak == 2
    assert queue.get_stats().completed == 6


@pytest.mark.asyncio
async def test_completed_task_records_result_and_timing():
    queue = TaskQueue()

    async def work():
        return 42

    task_id = queue.add(work)
    assert queue.get_task_status(task_id).status == TaskStatus.QUEUED
    await queue.join()

    task = queue.get_task_status(task_id)
    assert task.status == TaskStatus.COMPLETED
    assert task.result == 42
    assert task.error is None
    assert task.started_at is not None
    assert task.completed_at >= task.started_at
    assert task.duration_ms >= 0


@pytest.mark.asyncio
async def test_failing_payload_does_not_stop_queue():
    queue = TaskQueue()

    def boom():
        raise ValueError("bad payload")

    failed_id = queue.add(boom, priority=1)
    ok_id = queue.add(lambda: "fine")
    await queue.join()

    failed = queue.get_task_status(failed_id)
    assert failed.status == TaskStatus.FAILED
    assert failed.error == "bad payload"
    assert failed.result is None
    assert queue.get_task_status(ok_id).status == TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_cancel_pending_task():
    queue = TaskQueue()
    queue.pause()
    task_id = queue.add(lambda: "never")

    assert queue.cancel(task_id) is True
    assert queue.get_queue() == []
    history = queue.get_history()
    assert history[-1].id == task_id
    assert history[-1].status == TaskStatus.CANCELLED
    assert history[-1].completed_at is not None
    assert history[-1].started_at is None


@pytest.mark.asyncio
async def test_cancel_running_task_is_refused():
    queue = TaskQueue()
    release = asyncio.Event()

    async def blocked():
        await release.wait()
        return "released"

    task_id = queue.add(blocked)
    await _settle()
    assert queue.get_task_status(task_id).status == TaskStatus.RUNNING

    assert queue.cancel(task_id) is False
    assert queue.get_task_status(task_id).status == TaskStatus.RUNNING

    release.set()
    await queue.join()
    assert queue.get_task_status(task_id).status == TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_cancel_unknown_task():
    queue = TaskQueue()
    assert queue.cancel("task_missing") is False


@pytest.mark.asyncio
async def test_pause_lets_running_finish_and_resume_continues():
    queue = TaskQueue()
    release = asyncio.Event()
    order = []

    async def first():
        await release.wait()
        order.append("first")

    queue.add(first)
    await _settle()
    queue.pause()
    second_id = queue.add(lambda: order.append("second"))

    release.set()
    await queue.join()
    assert order == ["first"]
    assert queue.get_task_status(second_id).status == TaskStatus.QUEUED
    assert queue.get_stats().paused is True

    queue.resume()
    await queue.join()
    assert order == ["first", "second"]


@pytest.mark.asyncio
async def test_clear_cancels_pending_only():
    queue = TaskQueue()
    release = asyncio.Event()

    async def blocked():
        await release.wait()

    running_id = queue.add(blocked)
    await _settle()
    pending = [queue.add(lambda: None) for _ in range(3)]

    assert queue.clear() == 3
    assert queue.get_queue() == []
    for task_id in pending:
        assert queue.get_task_status(task_id).status == TaskStatus.CANCELLED
    assert queue.get_task_status(running_id).status == TaskStatus.RUNNING

    release.set()
    await queue.join()
    stats = queue.get_stats()
    assert stats.cancelled == 3
    assert stats.completed == 1


@pytest.mark.asyncio
async def test_set_max_concurrent_clamps():
    queue = TaskQueue()
    queue.set_max_concurrent(0)
    assert queue.max_concurrent == 1
    queue.set_max_concurrent(-5)
    assert queue.get_stats().max_concurrent == 1
    queue.set_max_concurrent(4)
    assert queue.max_concurrent == 4


@pytest.mark.asyncio
async def test_stats_and_history_limit():
    queue = TaskQueue(max_concurrent=3)
    for _ in range(4):
        queue.add(lambda: "ok")
    queue.add(lambda: 1 / 0)
    await queue.join()

    stats = queue.get_stats()
    assert stats.total == 5
    assert stats.completed == 4
    assert stats.failed == 1
    assert stats.pending == 0
    assert stats.running == 0
    assert len(queue.get_history(limit=2)) == 2
    assert queue.get_history(limit=0) == []


@pytest.mark.asyncio
async def test_history_retention_evicts_oldest():
    queue = TaskQueue(history_limit=2)
    ids = [queue.add(lambda: None) for _ in range(3)]
    await queue.join()

    assert [t.id for t in queue.get_history()] == ids[1:]
    queue.clear_history()
    assert queue.get_history() == []


@pytest.mark.asyncio
async def test_reorder_sorts_pending_by_priority():
    queue = TaskQueue()
    queue.pause()
    low = queue.add(lambda: None, priority=0)
    high = queue.add(lambda: None, priority=9)
    queue._pending.reverse()

    queue.reorder()
    assert [t.id for t in queue.get_queue()] == [high, low]


@pytest.mark.asyncio
async def test_accessors_return_copies():
    queue = TaskQueue()
    queue.pause()
    task_id = queue.add(lambda: None)
    snapshot = queue.get_task_status(task_id)
    snapshot.status = TaskStatus.COMPLETED
    assert queue.get_task_status(task_id).status == TaskStatus.QUEUED


def test_add_rejects_non_callable():
    queue = TaskQueue()
    with pytest.raises(TypeError):
        queue.add("not callable")
