"""Built-in workflow templates."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, Union

from .contracts import Workflow
from .errors import TemplateNotFoundError
from .templating import find_placeholders, resolve_parameters

BUILTIN_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "email-summary": {
        "name": "Email Summary",
        "description": "Create and send an email summary",
        "steps": [
            {"name": "open_email_client", "action_type": "app_open", "params": {"name": "outlook"}},
            {
                "name": "compose_email",
                "action_type": "keyboard_shortcut",
                "params": {"shortcut": "ctrl+n"},
                "delay_ms": 1000,
            },
            {"name": "type_subject", "action_type": "keyboard_type", "params": {"text": "{{subject}}"}},
            {"name": "tab_to_body", "action_type": "keyboard_press", "params": {"key": "tab"}},
            {"name": "type_body", "action_type": "keyboard_type", "params": {"text": "{{body}}"}},
        ],
    },
    "screenshot-and-save": {
        "name": "Screenshot and Save",
        "description": "Take a screenshot and save it",
        "steps": [
            {"name": "capture_screen", "action_type": "screen_capture", "params": {}},
            {
                "name": "save_screenshot",
                "action_type": "file_write",
                "params": {"path": "{{savePath}}", "content": "{{screenshotData}}"},
            },
        ],
    },
    "open-website": {
        "name": "Open Website",
        "description": "Open a browser and navigate to a website",
        "steps": [
            {"name": "open_browser", "action_type": "app_open", "params": {"name": "chrome"}},
            {
                "name": "navigate",
                "action_type": "browser_navigate",
                "params": {"url": "{{url}}"},
                "delay_ms": 2000,
            },
        ],
    },
}


class TemplateCatalog:
    """Named workflow blueprints that are instantiated with variables."""

    def __init__(self, include_builtin: bool = True) -> None:
        self._templates: Dict[str, Dict[str, Any]] = (
            copy.deepcopy(BUILTIN_TEMPLATES) if include_builtin else {}
        )

    def register(self, name: str, template: Union[Workflow, Mapping[str, Any]]) -> None:
        """Add or replace a template. The structure is validated up front."""
        if isinstance(template, Workflow):
            data = template.model_dump(exclude_none=True)
        else:
            data = copy.deepcopy(dict(template))
            Workflow.model_validate(data)
        self._templates[name] = data

    def unregister(self, name: str) -> bool:
        return self._templates.pop(name, None) is not None

    def get(self, name: str) -> Dict[str, Any]:
        if name not in self._templates:
            raise TemplateNotFoundError(name)
        return copy.deepcopy(self._templates[name])

    def names(self) -> List[str]:
        return list(self._templates)

    def variables(self, name: str) -> List[str]:
        """Placeholder names a template expects, in first-use order."""
        return list(dict.fromkeys(find_placeholders(self.get(name))))

    def instantiate(
        self, name: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Workflow:
        """Substitute ``variables`` into the whole template and build a workflow."""
        resolved = resolve_parameters(self.get(name), variables or {})
        return Workflow.model_validate(resolved)

    def __contains__(self, name: object) -> bool:
        return name in self._templates
