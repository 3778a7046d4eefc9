"""
Prompt Management Module

Loads prompt templates from the .txt files in this directory so wording can be
changed without touching code. Templates use str.format named fields; values
are substituted verbatim and never re-parsed.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent

REPLY_PROMPT = "reply_prompt"
GENERATION_WRAPPER = "generation_wrapper"


class PromptLoader:
    """Load and cache prompt templates from files"""

    def __init__(self, prompts_dir: Path = PROMPTS_DIR):
        self.prompts_dir = prompts_dir
        self._cache: dict[str, str] = {}

    def load_prompt(self, prompt_name: str) -> str:
        """
        Load a prompt template from file.

        Args:
            prompt_name: Name of the prompt file (without .txt extension)

        Returns:
            Prompt template string

        Raises:
            FileNotFoundError: If no such template exists
        """
        if prompt_name not in self._cache:
            prompt_path = self.prompts_dir / f"{prompt_name}.txt"

            if not prompt_path.exists():
                raise FileNotFoundError(f"Prompt file not found: {prompt_path}")

            with open(prompt_path, encoding="utf-8") as f:
                self._cache[prompt_name] = f.read()

        return self._cache[prompt_name]

    def render(self, prompt_name: str, **fields: object) -> str:
        """Load a template and substitute its named fields."""
        return self.load_prompt(prompt_name).format(**fields)


@lru_cache(maxsize=1)
def get_prompt_loader() -> PromptLoader:
    """Shared loader so templates are read from disk once per process."""
    return PromptLoader()
