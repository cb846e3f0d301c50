"""Tests for prompt template and JSON schema loading."""

from pathlib import Path

import pytest

from intake.analysis.exceptions import PromptLoadError
from intake.analysis.prompt_loader import load_prompt_bundle


class TestLoadPromptBundle:
    def test_loads_classification_bundle(self) -> None:
        bundle = load_prompt_bundle("classification")
        assert "{document_text}" in bundle.template
        assert "{filename}" in bundle.template
        assert "{json_schema}" in bundle.template
        assert bundle.schema["type"] == "object"

    def test_loads_medical_bundle(self) -> None:
        bundle = load_prompt_bundle("medical")
        assert "{document_text}" in bundle.template
        assert "vitalSigns" in bundle.schema["properties"]

    def test_templates_format_cleanly(self) -> None:
        for name in ("classification", "medical"):
            bundle = load_prompt_bundle(name)
            rendered = bundle.template.format(
                filename="a.pdf", document_text="TEXT", json_schema=bundle.schema_text
            )
            assert "TEXT" in rendered

    def test_loads_custom_directory(self, tmp_path: Path) -> None:
        (tmp_path / "custom_prompt.txt").write_text("Hello {document_text}")
        (tmp_path / "custom_schema.json").write_text('{"type": "object"}')

        bundle = load_prompt_bundle("custom", tmp_path)

        assert bundle.template == "Hello {document_text}"
        assert bundle.schema == {"type": "object"}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(PromptLoadError, match="Failed to load"):
            load_prompt_bundle("missing", tmp_path)

    def test_invalid_schema_raises(self, tmp_path: Path) -> None:
        (tmp_path / "bad_prompt.txt").write_text("x")
        (tmp_path / "bad_schema.json").write_text("{not json")

        with pytest.raises(PromptLoadError, match="Invalid JSON schema"):
            load_prompt_bundle("bad", tmp_path)
