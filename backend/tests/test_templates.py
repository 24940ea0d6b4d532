"""
Tests for note templates and their YAML loader.
"""
import pytest

from notegen.config import BACKEND_DIR
from notegen.config_loader import load_template_configs
from notegen.services.templates import (
    NoteTemplate,
    TemplateNotFoundError,
    TemplateRegistry,
    build_input,
)


@pytest.fixture
def registry():
    return TemplateRegistry()


class TestConfigLoader:
    """Tests for loading templates from YAML."""

    def test_load_shipped_templates(self, registry):
        count = load_template_configs(BACKEND_DIR / "templates", registry)

        assert count == 4
        names = [t.name for t in registry.list_templates()]
        assert names == ["meeting", "study", "research", "project"]

        meeting = registry.get("meeting")
        assert meeting.title == "Meeting Notes"
        assert "action items" in meeting.prompt
        assert not meeting.prompt.endswith("\n")

    def test_missing_directory(self, registry, tmp_path):
        count = load_template_configs(tmp_path / "missing", registry)

        assert count == 0
        assert registry.list_templates() == []

    def test_broken_file_is_skipped(self, registry, tmp_path):
        (tmp_path / "a_good.yaml").write_text(
            "templates:\n  - name: daily\n    prompt: Summarize my day.\n",
            encoding="utf-8",
        )
        (tmp_path / "b_broken.yml").write_text(
            "templates:\n  - title: No name\n",
            encoding="utf-8",
        )

        count = load_template_configs(tmp_path, registry)

        assert count == 1
        daily = registry.get("daily")
        assert daily.title == "daily"
        assert daily.icon == ""


class TestRegistry:
    """Tests for TemplateRegistry."""

    def test_unknown_template(self, registry):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            registry.get("nope")

        assert exc_info.value.message == "Unknown template: nope"

    def test_register_replaces_same_name(self, registry):
        registry.register(NoteTemplate(name="a", title="A", prompt="one"))
        registry.register(NoteTemplate(name="a", title="A", prompt="two"))

        assert len(registry.list_templates()) == 1
        assert registry.get("a").prompt == "two"


class TestBuildInput:
    """Tests for combining templates with user content."""

    def test_content_only(self):
        assert build_input("  raw text \n") == "raw text"

    def test_blank_content(self):
        template = NoteTemplate(name="a", title="A", prompt="Do it.")

        assert build_input("   ", template) == ""

    def test_template_prompt_first(self):
        template = NoteTemplate(name="a", title="A", prompt="Do it.")

        assert build_input("raw text", template) == "Do it.\n\nraw text"
