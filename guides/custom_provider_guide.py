"""Registering your own actions and approving dangerous ones.

Run with ``python guides/custom_provider_guide.py``. Actions are plain
callables that take the resolved params mapping. Anything the safety policy
marks as dangerous is routed through the confirmation gate first.
"""

import asyncio

from deskflow import FunctionProvider, build_core
from deskflow.providers import default_providers
from deskflow.security import CallbackGate

inbox = ["invoice.pdf", "newsletter.html", "receipt.pdf"]


def list_inbox(params):
    suffix = params.get("suffix", "")
    return [name for name in inbox if name.endswith(suffix)]


async def archive(params):
    await asyncio.sleep(0.01)
    return f"archived {params['items']}"


def approve(request):
    print(f"Approve {request.action_type} with {request.params}? yes")
    return True


async def main():
    mail = FunctionProvider(
        {"mail_list": list_inbox, "mail_archive": archive},
        name="mail",
        dangerous_actions=frozenset({"mail_archive"}),
    )
    core = build_core(providers=default_providers() + [mail], gate=CallbackGate(approve))
    core.executor.policy.add_dangerous_action("mail_archive")

    execution = await core.engine.execute_workflow(
        {
            "name": "Archive PDFs",
            "steps": [
                {"name": "pdfs", "action": "mail_list", "params": {"suffix": ".pdf"}},
                {"name": "archive", "action": "mail_archive", "params": {"items": "{{pdfs}}"}},
            ],
        }
    )
    print(execution.status.value, execution.context["archive"])

    for entry in core.executor.audit.entries():
        print(f"audit: {entry.event} {entry.action_type}")


if __name__ == "__main__":
    asyncio.run(main())
