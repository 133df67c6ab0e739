"""InitService: create a library directory, its config, and its database."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from sqlalchemy.exc import SQLAlchemyError

from cglctl.config.discovery import CONFIG_FILENAME
from cglctl.infrastructure.database.engine import (
    DEFAULT_DB_FILENAME,
    database_path,
    init_database,
)
from cglctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)


def render_config(name: str) -> str:
    """Sparse ``cglctl.toml`` for a fresh library.

    Only the library name is written; every other setting keeps its
    code default until the user overrides it.
    """
    return (
        "# cglctl library configuration\n"
        "\n"
        "[library]\n"
        f"name = {json.dumps(name)}\n"
        "\n"
        "# [numbering]\n"
        "# book_step = 5\n"
        "# chapter_step = 5\n"
        "# record_step = 10\n"
    )


class InitService:
    """Library initialization.  Static: there is no library to inject yet."""

    @staticmethod
    def init_library(
        path: Path,
        *,
        name: str | None = None,
        filename: str = DEFAULT_DB_FILENAME,
    ) -> ServiceResult:
        """Create ``cglctl.toml`` and the database under *path*.

        An existing config file is kept as-is; the database is created
        idempotently, so re-running init on a library is harmless.
        """
        op = "init_library"
        root = path.resolve()
        name = name or root.name or "my-library"

        if root.exists() and not root.is_dir():
            return ServiceResult.failure(
                op, "VALIDATION_FAILED", f"{root} exists and is not a directory"
            )

        config_file = root / CONFIG_FILENAME
        warnings: list[str] = []
        try:
            root.mkdir(parents=True, exist_ok=True)
            config_created = not config_file.exists()
            if config_created:
                config_file.write_text(render_config(name), encoding="utf-8")
            else:
                warnings.append(f"{config_file} already exists; left unchanged")
            engine = init_database(root, filename=filename)
            engine.dispose()
        except OSError as exc:
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc), path=str(root))
        except SQLAlchemyError as exc:
            logger.warning("init_failed", path=str(root), error=str(exc))
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc), path=str(root))

        logger.info("library_initialized", path=str(root))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "path": str(root),
                "database": str(database_path(root, filename)),
                "config": str(config_file),
                "config_created": config_created,
            },
            warnings=warnings,
        )
