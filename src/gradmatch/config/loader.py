"""Run-configuration loading and validation.

YAML files are parsed with PyYAML and validated against the Pydantic schemas
in :mod:`gradmatch.config.schemas`.

Example
-------
>>> from gradmatch.config.loader import load_config
>>> from gradmatch.config.schemas import RunConfig
>>>
>>> config = load_config("configs/run_example.yaml", RunConfig)
>>> print(config.population_size)
50
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

__all__ = ["load_config", "save_config", "ConfigError"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


def _resolve_config_path(file_path: Union[str, Path], project_root: Optional[Path] = None) -> Path:
    """Resolve a configuration file path.

    Absolute paths are returned as-is when they exist; relative paths are
    tried against ``project_root`` first and the working directory second.

    Raises
    ------
    FileNotFoundError
        If the file cannot be found in any location.
    """
    path = Path(file_path)

    if path.is_absolute() and path.exists():
        return path

    if project_root is None:
        project_root = Path(__file__).resolve().parents[3]

    resolved = project_root / path
    if resolved.exists():
        return resolved

    if path.exists():
        return path.resolve()

    raise FileNotFoundError(f"Config file not found: {file_path}")


def load_config(
    file_path: Union[str, Path],
    schema: Type[T],
    *,
    project_root: Optional[Path] = None,
    strict: bool = True,
) -> T:
    """Load and validate a YAML configuration file.

    Parameters
    ----------
    file_path : str or Path
        Path to the YAML configuration file.
    schema : Type[BaseModel]
        Pydantic model class to validate against.
    project_root : Path, optional
        Project root directory for path resolution.
    strict : bool, default=True
        If True, raise on any failure. If False, log a warning and return
        ``schema()`` built from its defaults.

    Raises
    ------
    ConfigError
        If file loading or validation fails (only when ``strict=True``).
    """
    try:
        resolved_path = _resolve_config_path(file_path, project_root)

        logger.debug("Loading config from: %s", resolved_path)
        with open(resolved_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            raise ConfigError(f"Empty configuration file: {file_path}")

        try:
            config = schema.model_validate(data)
        except ValidationError as e:
            error_msg = f"Configuration validation failed for {file_path}:\n{e}"
            if strict:
                raise ConfigError(error_msg) from e
            logger.warning(error_msg)
            logger.warning("Returning default configuration")
            return schema()
        logger.info("Loaded config: %s", resolved_path.name)
        return config

    except FileNotFoundError as e:
        if strict:
            raise ConfigError(f"Configuration file not found: {file_path}") from e
        logger.warning("Config file not found: %s, using defaults", file_path)
        return schema()
    except yaml.YAMLError as e:
        error_msg = f"Invalid YAML syntax in {file_path}: {e}"
        if strict:
            raise ConfigError(error_msg) from e
        logger.warning(error_msg)
        return schema()


def save_config(
    config: BaseModel, file_path: Union[str, Path], *, project_root: Optional[Path] = None
) -> Path:
    """Save a Pydantic configuration model to a YAML file.

    Relative paths are resolved against ``project_root``. Returns the absolute
    path that was written.
    """
    path = Path(file_path)

    if not path.is_absolute():
        if project_root is None:
            project_root = Path(__file__).resolve().parents[3]
        path = project_root / path

    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="python", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

    logger.info("Saved configuration to: %s", path)
    return path
