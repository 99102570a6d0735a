"""
Name: Prompt Loader

Responsibilities:
  - Load prompt templates from packaged files
  - Support versioning via PROMPT_VERSION env var
  - Cache loaded templates for performance

Collaborators:
  - config: Get prompt_version setting
  - templates/{version}_{name}.md: Template files

Notes:
  - Templates use str.format placeholders ({context}, {symptoms}, ...);
    literal braces are doubled
  - Missing templates raise FileNotFoundError
"""

from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict

from ...logger import logger

# R: Directory containing prompt templates
PROMPTS_DIR = Path(__file__).parent / "templates"

DIAGNOSIS_SYSTEM = "diagnosis_system"
DIAGNOSIS_USER = "diagnosis_user"
DIRECT_SYSTEM = "direct_system"
DIRECT_USER = "direct_user"
CHAT_SYSTEM = "chat_system"
CHAT_USER = "chat_user"


class PromptLoader:
    """
    R: Load and cache prompt templates by version.
    """

    def __init__(self, version: str = "v1", prompts_dir: Path = PROMPTS_DIR):
        self.version = version
        self.prompts_dir = Path(prompts_dir)
        self._templates: Dict[str, str] = {}
        self._lock = Lock()

    def get_template(self, name: str) -> str:
        """
        R: Get a template by name, loading from file if needed.

        Raises:
            FileNotFoundError: If template file doesn't exist
        """
        template = self._templates.get(name)
        if template is None:
            with self._lock:
                template = self._templates.get(name)
                if template is None:
                    template = self._load_template(name)
                    self._templates[name] = template
        return template

    def _load_template(self, name: str) -> str:
        filepath = self.prompts_dir / f"{self.version}_{name}.md"

        if not filepath.exists():
            logger.error(
                f"Prompt template not found: {filepath}",
                extra={"version": self.version, "template": name},
            )
            raise FileNotFoundError(f"Prompt template not found: {filepath}")

        template = filepath.read_text(encoding="utf-8")
        logger.info(
            "Loaded prompt template",
            extra={"version": self.version, "template": name, "chars": len(template)},
        )
        return template

    def format(self, name: str, **values: str) -> str:
        return self.get_template(name).format(**values).strip()


@lru_cache
def get_prompt_loader() -> PromptLoader:
    """
    R: Get singleton PromptLoader with configured version.
    """
    from ...config import get_settings

    return PromptLoader(version=get_settings().prompt_version)
