from pathlib import Path

from atlas.analysis.exceptions import AnalysisError
from atlas.documents.models import Category

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the extraction instruction preamble and fill in the rubric.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled system_prompt.txt.

    Returns:
        The rendered system prompt with the numbered category list.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "system_prompt.txt"
    try:
        template = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load prompt template: {exc}") from exc
    categories = "\n".join(
        f"{i}. {category.value}" for i, category in enumerate(Category.rubric(), start=1)
    )
    return template.format(categories=categories)
