"""
SQLite-backed storage for domain models, keyed by workspace.

Schema:
- projects: workspace_path (canonical, primary key), project_name,
  model_json, created_at, updated_at (ISO-8601 UTC)

One row per workspace; ``save`` is an upsert. The default database lives
at ``~/.domcp/domcp.db`` (see ``domcp.core.config``).
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from . import ir
from .errors import DomcpError, StoreError
from .loader import load_model_file, parse_model_json

logger = logging.getLogger("domcp.store")


@dataclass
class ProjectInfo:
    """Metadata about a stored project."""

    workspace_path: str
    project_name: str
    updated_at: str


class ModelRepository(Protocol):
    """Persistence operations the MCP server depends on."""

    def load(self, workspace_path: str) -> ir.DomainModel | None: ...

    def save(self, workspace_path: str, model: ir.DomainModel) -> None: ...


def canonicalize_workspace(path: str | Path) -> str:
    """
    Normalize a workspace path for consistent keying.

    Trailing slashes are stripped, then the path is resolved (symlinks,
    relative segments). A path that does not exist keys as the stripped
    string, and an empty path stays empty.
    """
    raw = str(path)
    if not raw:
        return raw
    normalized = raw.rstrip("/") or raw
    try:
        return str(Path(normalized).resolve(strict=True))
    except OSError:
        return normalized


class ModelStore:
    """
    Domain model store.

    Connection-per-call, except for ``:memory:`` databases which keep one
    persistent connection so data survives between calls.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        """
        Open (or create) the store.

        Args:
            db_path: Path to the SQLite database, or ":memory:" for in-memory.

        Raises:
            StoreError: If the database directory or schema cannot be created
        """
        self._db_path = str(db_path)
        self._is_memory = self._db_path == ":memory:"
        if not self._is_memory:
            parent = Path(self._db_path).expanduser().parent
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreError(f"Failed to create directory: {parent}: {e}") from e
            self._db_path = str(Path(self._db_path).expanduser())

        self._persistent_conn: sqlite3.Connection | None = None
        if self._is_memory:
            self._persistent_conn = self._create_connection()
        self._init_schema()
        logger.debug("Opened model store at %s", self._db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def _create_connection(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open database: {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        if self._is_memory and self._persistent_conn:
            return self._persistent_conn
        return self._create_connection()

    def _close_connection(self, conn: sqlite3.Connection) -> None:
        """Close a connection (but not the persistent one for in-memory DBs)."""
        if not self._is_memory:
            conn.close()

    def _init_schema(self) -> None:
        conn = self._get_connection()
        try:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS projects (
                    workspace_path TEXT PRIMARY KEY,
                    project_name   TEXT NOT NULL,
                    model_json     TEXT NOT NULL,
                    created_at     TEXT NOT NULL,
                    updated_at     TEXT NOT NULL
                );
                """
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize database schema: {e}") from e
        finally:
            self._close_connection(conn)

    def close(self) -> None:
        if self._persistent_conn is not None:
            self._persistent_conn.close()
            self._persistent_conn = None

    # =========================================================================
    # Operations
    # =========================================================================

    def load(self, workspace_path: str) -> ir.DomainModel | None:
        """
        Load the model stored for a workspace.

        Returns:
            The validated model, or None when the workspace has no row

        Raises:
            StoreError: On query failure or when the stored JSON is invalid
        """
        key = canonicalize_workspace(workspace_path)
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT model_json FROM projects WHERE workspace_path = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to query project: {e}") from e
        finally:
            self._close_connection(conn)

        if row is None:
            return None
        try:
            model = parse_model_json(row["model_json"])
        except DomcpError as e:
            raise StoreError(f"Failed to parse stored domain model for {key}: {e}") from e
        logger.debug("Loaded model '%s' for %s", model.name, key)
        return model

    def save(self, workspace_path: str, model: ir.DomainModel) -> None:
        """Save (upsert) the model for a workspace."""
        key = canonicalize_workspace(workspace_path)
        now = datetime.now(UTC).isoformat()
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO projects (workspace_path, project_name, model_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(workspace_path) DO UPDATE SET
                    project_name = excluded.project_name,
                    model_json = excluded.model_json,
                    updated_at = excluded.updated_at
                """,
                (key, model.name, model.to_json(), now, now),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to save domain model: {e}") from e
        finally:
            self._close_connection(conn)
        logger.debug("Saved model '%s' for %s", model.name, key)

    def list(self) -> list[ProjectInfo]:
        """All stored projects, most recently updated first."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                """
                SELECT workspace_path, project_name, updated_at FROM projects
                ORDER BY updated_at DESC, workspace_path
                """
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list projects: {e}") from e
        finally:
            self._close_connection(conn)

        return [
            ProjectInfo(
                workspace_path=row["workspace_path"],
                project_name=row["project_name"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]

    def import_from_file(self, workspace_path: str, file_path: str | Path) -> ir.DomainModel:
        """
        Validate a JSON model file and store it for a workspace.

        Raises:
            ModelValidationError: If the file is not a valid model
            StoreError: If saving fails
        """
        model = load_model_file(file_path)
        self.save(workspace_path, model)
        return model

    def export_to_file(self, workspace_path: str, file_path: str | Path) -> None:
        """
        Write the stored model of a workspace to a JSON file.

        Raises:
            StoreError: If no model is stored or the file cannot be written
        """
        model = self.load(workspace_path)
        if model is None:
            raise StoreError(f"No model found for workspace: {workspace_path}")
        try:
            Path(file_path).write_text(model.to_json(), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to write file: {file_path}: {e}") from e


__all__ = [
    "ModelRepository",
    "ModelStore",
    "ProjectInfo",
    "canonicalize_workspace",
]
