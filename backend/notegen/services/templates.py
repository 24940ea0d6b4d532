"""
Note Template Service.

Registry of prompt templates that steer note generation (meeting notes,
study notes, ...). Templates are loaded from YAML at startup, see
notegen.config_loader.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from notegen.services.generation.errors import GenerationError

logger = logging.getLogger(__name__)


class TemplateNotFoundError(GenerationError):
    """Raised when a template name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown template: {name}")


@dataclass(frozen=True)
class NoteTemplate:
    """Prompt template for a kind of notes."""

    name: str
    title: str
    prompt: str
    icon: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class TemplateRegistry:
    """Registry of note templates, keyed by name, in registration order."""

    def __init__(self):
        self._templates: dict[str, NoteTemplate] = {}

    def register(self, template: NoteTemplate) -> None:
        """Register a template, replacing one with the same name."""
        self._templates[template.name] = template
        logger.debug("Registered note template: %s", template.name)

    def get(self, name: str) -> NoteTemplate:
        template = self._templates.get(name)
        if template is None:
            raise TemplateNotFoundError(name)
        return template

    def list_templates(self) -> list[NoteTemplate]:
        return list(self._templates.values())


def build_input(content: str, template: Optional[NoteTemplate] = None) -> str:
    """
    Build the generation input from user content and an optional template.

    Returns:
        Template prompt and content separated by a blank line, or "" when
        the content is blank
    """
    content = content.strip()
    if not content:
        return ""
    if template is None:
        return content
    return f"{template.prompt}\n\n{content}"


# Singleton instance
template_registry = TemplateRegistry()
