"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``CGLCTL_*`` prefix
  3. TOML file: ``cglctl.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`; the
file it reads comes from the library walk-up in :mod:`cglctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cglctl.config.discovery import LibraryLocation, locate_library
from cglctl.config.models import DatabaseConfig, LibraryConfig, NumberingConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``cglctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CglSettings(BaseSettings):
    """Unified settings for the entire cglctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        library_root: Resolved library directory (nearest one holding
            ``cglctl.toml`` or ``.cglctl/``, or CWD if none is found).
        config_path: The TOML file in use, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CGLCTL_",
        "env_nested_delimiter": "__",
    }

    library_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    library: LibraryConfig = Field(default_factory=LibraryConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    numbering: NumberingConfig = Field(default_factory=NumberingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        library_root: Path | None = None,
        **cli_flags: Any,
    ) -> CglSettings:
        """Construct settings from CLI invocation.

        Locates the library by walking up from *library_root* (default:
        cwd) unless an explicit *config_path* is given, then merges CLI
        flags as highest-priority overrides.  Without any library in
        reach, the working directory becomes the root of a new one.
        """
        location: LibraryLocation | None
        if config_path:
            p = Path(config_path)
            location = LibraryLocation.from_config(p) if p.is_file() else None
        else:
            location = locate_library(library_root)

        resolved_root = library_root
        if resolved_root is None:
            resolved_root = location.root if location else Path.cwd()
        toml_path = location.config if location else None

        _tls.toml_path = toml_path
        try:
            return cls(
                library_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
