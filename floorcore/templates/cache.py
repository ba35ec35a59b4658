"""Per-project template cache owned by the calling layer."""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from floorcore.exceptions import TemplateNotFoundError
from floorcore.templates.placement import Template

TemplateLoader = Callable[[str], List[Template]]


class TemplateCache:
    """Templates keyed by project id, with an optional time-to-live.

    Nothing here talks to a backend: callers pass a loader to
    :meth:`get_or_load` and call :meth:`invalidate` after writes.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[Template]]] = {}

    def get(self, project_id: str) -> Optional[List[Template]]:
        entry = self._entries.get(project_id)
        if entry is None:
            return None
        stored_at, templates = entry
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            del self._entries[project_id]
            return None
        return list(templates)

    def put(self, project_id: str, templates: List[Template]) -> None:
        self._entries[project_id] = (self._clock(), list(templates))

    def get_or_load(self, project_id: str, loader: TemplateLoader) -> List[Template]:
        cached = self.get(project_id)
        if cached is not None:
            return cached
        templates = loader(project_id)
        logger.debug("Loaded {} templates for project {}", len(templates), project_id)
        self.put(project_id, templates)
        return list(templates)

    def find(self, project_id: str, template_id: str) -> Template:
        for template in self.get(project_id) or []:
            if template.id == template_id:
                return template
        raise TemplateNotFoundError(
            f"Template {template_id} not cached for project {project_id}",
            {"project_id": project_id, "template_id": template_id},
        )

    def invalidate(self, project_id: Optional[str] = None) -> None:
        if project_id is None:
            self._entries.clear()
        else:
            self._entries.pop(project_id, None)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
