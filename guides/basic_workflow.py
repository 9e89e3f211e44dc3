"""Simple example showing a workflow whose steps feed each other."""

import asyncio
import tempfile
from pathlib import Path

from deskflow import Step, Workflow, build_core


async def main():
    """Basic workflow execution example."""
    core = build_core()
    out_dir = Path(tempfile.mkdtemp())

    # Each step output is stored under the step name for later steps
    workflow = Workflow(
        name="Daily note",
        steps=[
            Step(name="greeting", action_type="echo", params={"value": "Good morning {{user}}"}),
            Step(
                name="save",
                action_type="file_write",
                params={"path": "{{notes}}/today.txt", "content": "{{greeting}}"},
            ),
            Step(name="check", action_type="file_read", params={"path": "{{notes}}/today.txt"}),
        ],
    )

    execution = await core.engine.execute_workflow(
        workflow, {"user": "Ada", "notes": str(out_dir)}
    )

    print(f"✅ Workflow finished: {execution.status.value}")
    print(f"📋 Execution ID: {execution.id}")
    for step in execution.steps:
        print(f"🔗 {step.name}: {step.status.value} ({step.duration_ms}ms)")
    print(f"📝 File contents: {execution.context['check']}")


if __name__ == "__main__":
    asyncio.run(main())
