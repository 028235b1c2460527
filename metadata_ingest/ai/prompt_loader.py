import json
from pathlib import Path

from metadata_ingest.ai.exceptions import PromptLoadError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template by file name.

    Args:
        name: File name inside the prompt directory, e.g. ``analysis_prompt.txt``.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Returns:
        The raw template string with ``str.format`` placeholders.

    Raises:
        PromptLoadError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptLoadError(f"Failed to load prompt template: {exc}") from exc


def load_tool_schema(path: Path | None = None) -> dict[str, object]:
    """Load the ``analyze_file`` function-tool schema.

    Raises:
        PromptLoadError: if the file cannot be read or is not a JSON object.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "analyze_file_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PromptLoadError(f"Failed to load tool schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise PromptLoadError("Tool schema must be a JSON object")
    return schema
