"""Project settings loader.

Reads project-specific configuration from .formfoundry.yaml in the project
root. This lets teams pick the error policy, add their own schema
directories and choose the log format per project.

Example .formfoundry.yaml:
    forms:
      error_policy: retain          # or clear_on_edit (default)
      schema_dirs:                  # Searched before the built-in schemas
        - ./forms
      log_format: json              # or text (default)
      verbose: false
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

SETTINGS_FILE = ".formfoundry.yaml"

ERROR_POLICIES = ("clear_on_edit", "retain")
LOG_FORMATS = ("text", "json")


@dataclass
class FormSettings:
    """formfoundry configuration settings."""

    # What happens to a displayed error when its field is edited
    error_policy: str = "clear_on_edit"

    # Extra directories holding <form>.yaml schema files (searched in order)
    schema_dirs: list[str] = field(default_factory=list)

    # Log output format for the command line
    log_format: str = "text"

    # Debug-level logging
    verbose: bool = False

    @classmethod
    def load(cls, project_root: Path | None = None) -> "FormSettings":
        """Load settings from .formfoundry.yaml in project root.

        Args:
            project_root: Project root directory. Defaults to cwd.

        Returns:
            FormSettings with values from config file or defaults.
        """
        root = project_root or Path.cwd()
        config_path = root / SETTINGS_FILE

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", config_path, e)
            return cls()

        forms_config = config.get("forms") if isinstance(config, dict) else None
        if not isinstance(forms_config, dict):
            return cls()

        defaults = cls()
        error_policy = forms_config.get("error_policy", defaults.error_policy)
        if error_policy not in ERROR_POLICIES:
            logger.warning(
                "Unknown error_policy %r in %s, using %s",
                error_policy,
                config_path,
                defaults.error_policy,
            )
            error_policy = defaults.error_policy

        log_format = forms_config.get("log_format", defaults.log_format)
        if log_format not in LOG_FORMATS:
            log_format = defaults.log_format

        schema_dirs = forms_config.get("schema_dirs") or []
        if isinstance(schema_dirs, str):
            schema_dirs = [schema_dirs]

        return cls(
            error_policy=error_policy,
            schema_dirs=[str(d) for d in schema_dirs],
            log_format=log_format,
            verbose=bool(forms_config.get("verbose", defaults.verbose)),
        )

    def get_schema_dirs(self, project_root: Path | None = None) -> list[Path]:
        """Get list of absolute paths to extra schema directories."""
        root = project_root or Path.cwd()
        return [(root / d).resolve() for d in self.schema_dirs]


# Global settings instance (loaded on first access)
_settings: FormSettings | None = None


def get_settings(reload: bool = False) -> FormSettings:
    """Get the global settings.

    Args:
        reload: Force reload from config file.

    Returns:
        FormSettings instance.
    """
    global _settings
    if _settings is None or reload:
        _settings = FormSettings.load()
    return _settings
