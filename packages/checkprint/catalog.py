"""In-memory catalog of templates with a single active template.

The catalog is a plain object owned by the hosting session and passed to the
code that needs it; there is no module-level registry. It is seeded with the
bundled default template followed by any caller-supplied templates, and the
first template becomes active. Setting an unknown id leaves the active
template unchanged and never raises.

The active id is the only mutable state. Hosts that share one catalog across
threads must synchronize access themselves.
"""

from __future__ import annotations

from collections.abc import Iterable

from .logging_setup import get_logger
from .templates import Template, load_default_template

_logger = get_logger("checkprint.catalog")


class TemplateCatalog:
    def __init__(
        self,
        templates: Iterable[Template] | None = None,
        *,
        include_default: bool = True,
    ) -> None:
        self._templates: dict[str, Template] = {}
        self._active_id: str | None = None

        seeded = [load_default_template()] if include_default else []
        seeded.extend(templates or ())
        for template in seeded:
            self.add(template)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def list_templates(self) -> list[Template]:
        """Return all templates in insertion order."""

        return list(self._templates.values())

    def get(self, template_id: str) -> Template | None:
        return self._templates.get(template_id)

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active(self) -> Template | None:
        if self._active_id is None:
            return None
        return self._templates.get(self._active_id)

    def set_active(self, template_id: str) -> Template | None:
        """Activate ``template_id`` when known; return the (possibly unchanged) active template."""

        if template_id in self._templates:
            self._active_id = template_id
        else:
            _logger.debug("catalog:set_active_unknown id=%s active=%s", template_id, self._active_id)
        return self.active

    def add(self, template: Template) -> None:
        """Add or replace a template by id; the first template added becomes active."""

        replaced = template.id in self._templates
        self._templates[template.id] = template
        if self._active_id is None:
            self._active_id = template.id
        _logger.debug("catalog:add id=%s replaced=%s", template.id, replaced)


__all__ = ["TemplateCatalog"]
