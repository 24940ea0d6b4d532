"""
Configuration loader for note templates.

Loads YAML template files at startup.
"""
import logging
from pathlib import Path
from typing import Optional

import yaml

from notegen.config import settings
from notegen.services.templates import NoteTemplate, TemplateRegistry, template_registry

logger = logging.getLogger(__name__)


def load_template_configs(
    directory: Optional[Path] = None,
    registry: TemplateRegistry = template_registry,
) -> int:
    """
    Load all note templates from directory.

    Each file holds a "templates" list of {name, title, prompt, icon}
    mappings. Broken files are logged and skipped.

    Returns:
        Number of templates registered
    """
    directory = directory or settings.templates_dir
    if not directory.exists():
        logger.warning("Templates directory not found: %s", directory)
        return 0

    count = 0
    paths = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))
    for path in paths:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            for entry in data.get("templates", []):
                template = NoteTemplate(
                    name=entry["name"],
                    title=entry.get("title", entry["name"]),
                    prompt=entry["prompt"].strip(),
                    icon=entry.get("icon", ""),
                )
                registry.register(template)
                count += 1
                logger.debug("Loaded note template: %s", template.name)

        except Exception as e:
            logger.error("Failed to load templates from %s: %s", path.name, e)

    logger.info("Loaded %d note templates", count)
    return count
