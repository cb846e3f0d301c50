import json
from dataclasses import dataclass
from pathlib import Path

from intake.analysis.exceptions import PromptLoadError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


@dataclass(frozen=True)
class PromptBundle:
    """A prompt template together with the JSON schema it embeds."""

    template: str
    schema_text: str
    schema: dict[str, object]


def load_prompt_bundle(name: str, prompt_dir: Path | None = None) -> PromptBundle:
    """Load ``{name}_prompt.txt`` and ``{name}_schema.json``.

    Args:
        name: Task name, e.g. "classification" or "medical".
        prompt_dir: Directory holding the files. Defaults to the bundled prompts.

    Raises:
        PromptLoadError: if either file cannot be read or the schema is not JSON.
    """
    directory = prompt_dir if prompt_dir is not None else _DEFAULT_PROMPT_DIR
    try:
        template = (directory / f"{name}_prompt.txt").read_text(encoding="utf-8")
        schema_text = (directory / f"{name}_schema.json").read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptLoadError(f"Failed to load '{name}' prompt files: {exc}") from exc
    try:
        schema = json.loads(schema_text)
    except json.JSONDecodeError as exc:
        raise PromptLoadError(f"Invalid JSON schema for '{name}': {exc}") from exc
    return PromptBundle(template=template, schema_text=schema_text, schema=schema)
