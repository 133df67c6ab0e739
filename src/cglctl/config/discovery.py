"""Locate the cglctl library that a working directory belongs to.

A library root is the nearest directory, walking up, that holds either
``cglctl.toml`` or the ``.cglctl/`` data directory.  A library does not
need a config file: one initialized without it (or whose config was
removed) is still found through its data directory, and the walk never
continues past it to an enclosing library's config.

``CGLCTL_CONFIG`` names a config file explicitly and skips the walk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from cglctl.infrastructure.database.engine import DATA_DIRNAME

CONFIG_FILENAME = "cglctl.toml"
CONFIG_ENV_VAR = "CGLCTL_CONFIG"


@dataclass(frozen=True)
class LibraryLocation:
    """A library root and the config file that applies to it, if any."""

    root: Path
    config: Path | None = None

    @classmethod
    def from_config(cls, config: Path) -> LibraryLocation:
        """The library whose root is the directory holding *config*."""
        return cls(root=config.resolve().parent, config=config)


def is_library_root(directory: Path) -> bool:
    """Whether *directory* holds a config file or a data directory."""
    return (directory / CONFIG_FILENAME).is_file() or (directory / DATA_DIRNAME).is_dir()


def locate_library(start: Path | None = None) -> LibraryLocation | None:
    """Walk up from *start* (default: cwd) to the nearest library root.

    Returns None when no library is found, or when ``CGLCTL_CONFIG``
    points at a missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        config = Path(env_path)
        return LibraryLocation.from_config(config) if config.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if is_library_root(directory):
            config = directory / CONFIG_FILENAME
            return LibraryLocation(root=directory, config=config if config.is_file() else None)
    return None
