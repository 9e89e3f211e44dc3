"""Example showing prioritized background work through the task queue."""

import asyncio

from deskflow import DeskflowConfig, build_core


async def main():
    config = DeskflowConfig()
    config.queue.max_concurrent = 2
    core = build_core(config)

    def workflow_task(label: str, ms: int):
        workflow = {
            "name": label,
            "steps": [
                {"name": "pause", "action": "wait", "params": {"ms": ms}},
                {"name": "report", "action": "echo", "params": {"value": f"{label} done"}},
            ],
        }
        return lambda: core.engine.execute_workflow(workflow)

    # Higher priority tasks start first; ties keep submission order
    ids = {
        "cleanup": core.queue.add(workflow_task("cleanup", 300), priority=0),
        "report": core.queue.add(workflow_task("report", 100), priority=5),
        "backup": core.queue.add(workflow_task("backup", 200), priority=5),
    }

    await core.queue.join()

    for label, task_id in ids.items():
        task = core.queue.get_task_status(task_id)
        print(f"{label}: {task.status.value} after {task.duration_ms}ms -> {task.result.context['report']}")

    stats = core.queue.get_stats()
    print(f"Completed {stats.completed}/{stats.total}, average {stats.average_duration_ms}ms")


if __name__ == "__main__":
    asyncio.run(main())
