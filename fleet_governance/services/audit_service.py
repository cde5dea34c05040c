"""Audit logging service for tracking governance operations."""

import json
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from ..models.audit import AuditLogEntry, AuditStatus


class AuditService:
    """
    SQLite-backed audit log.

    Entries live in ``audit_logs``; the resources each entry targeted are
    kept one row per resource in ``audit_resources`` so the log can be
    queried per resource.
    """

    def __init__(self, db_path: str = "audit_logs.db"):
        """
        Initialize the audit service.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self) -> None:
        """Create the audit tables and indexes if missing."""
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS audit_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    parameters TEXT NOT NULL,
                    status TEXT NOT NULL,
                    error_message TEXT,
                    execution_time_ms REAL,
                    correlation_id TEXT
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS audit_resources (
                    audit_id INTEGER NOT NULL REFERENCES audit_logs(id),
                    position INTEGER NOT NULL,
                    resource_id TEXT NOT NULL,
                    PRIMARY KEY (audit_id, position)
                )
                """
            )
            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_audit_timestamp
                ON audit_logs(timestamp)
                """
            )
            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_audit_resource
                ON audit_resources(resource_id)
                """
            )
            conn.commit()
        finally:
            conn.close()

    def log_invocation(
        self,
        operation: str,
        parameters: dict,
        status: AuditStatus,
        error_message: Optional[str] = None,
        execution_time_ms: Optional[float] = None,
        correlation_id: Optional[str] = None,
        resource_ids: Optional[list[str]] = None,
    ) -> AuditLogEntry:
        """
        Log a governance operation to the audit database.

        Args:
            operation: Name of the operation (e.g. "labels.apply")
            parameters: Parameters of the operation
            status: Success or failure status
            error_message: Error message if status is failure
            execution_time_ms: Execution time in milliseconds
            correlation_id: Request correlation ID, if any
            resource_ids: Resources the operation targeted

        Returns:
            AuditLogEntry with the logged data including generated ID
        """
        timestamp = datetime.now(timezone.utc)
        resource_ids = list(resource_ids or [])

        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO audit_logs
                (timestamp, operation, parameters, status, error_message,
                 execution_time_ms, correlation_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    timestamp.isoformat(),
                    operation,
                    json.dumps(parameters, default=str),
                    status.value,
                    error_message,
                    execution_time_ms,
                    correlation_id,
                ),
            )
            entry_id = cursor.lastrowid
            cursor.executemany(
                "INSERT INTO audit_resources (audit_id, position, resource_id) VALUES (?, ?, ?)",
                [(entry_id, position, rid) for position, rid in enumerate(resource_ids)],
            )
            conn.commit()
        finally:
            conn.close()

        return AuditLogEntry(
            id=entry_id,
            timestamp=timestamp,
            operation=operation,
            resource_ids=resource_ids,
            parameters=parameters,
            status=status,
            error_message=error_message,
            execution_time_ms=execution_time_ms,
            correlation_id=correlation_id,
        )

    def get_logs(
        self,
        operation: Optional[str] = None,
        status: Optional[AuditStatus] = None,
        limit: int = 100,
        resource_id: Optional[str] = None,
    ) -> list[AuditLogEntry]:
        """
        Retrieve audit logs with optional filtering, newest first.

        Args:
            operation: Filter by operation name
            status: Filter by status
            limit: Maximum number of logs to return
            resource_id: Only entries that targeted this resource

        Returns:
            List of audit log entries
        """
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()

            query = (
                "SELECT id, timestamp, operation, parameters, status, error_message, "
                "execution_time_ms, correlation_id FROM audit_logs WHERE 1=1"
            )
            params = []

            if operation:
                query += " AND operation = ?"
                params.append(operation)

            if status:
                query += " AND status = ?"
                params.append(status.value)

            if resource_id:
                query += " AND id IN (SELECT audit_id FROM audit_resources WHERE resource_id = ?)"
                params.append(resource_id)

            query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
            params.append(limit)

            cursor.execute(query, params)
            rows = cursor.fetchall()
            targets = self._targets_for(cursor, [row[0] for row in rows])

            return [
                AuditLogEntry(
                    id=row[0],
                    timestamp=datetime.fromisoformat(row[1]),
                    operation=row[2],
                    resource_ids=targets.get(row[0], []),
                    parameters=json.loads(row[3]),
                    status=AuditStatus(row[4]),
                    error_message=row[5],
                    execution_time_ms=row[6],
                    correlation_id=row[7],
                )
                for row in rows
            ]
        finally:
            conn.close()

    @staticmethod
    def _targets_for(cursor: sqlite3.Cursor, entry_ids: list[int]) -> dict[int, list[str]]:
        """Targeted resource IDs per entry, in recorded order."""
        if not entry_ids:
            return {}
        placeholders = ", ".join("?" for _ in entry_ids)
        cursor.execute(
            f"SELECT audit_id, resource_id FROM audit_resources "
            f"WHERE audit_id IN ({placeholders}) ORDER BY audit_id, position",
            entry_ids,
        )
        targets: dict[int, list[str]] = {}
        for audit_id, rid in cursor.fetchall():
            targets.setdefault(audit_id, []).append(rid)
        return targets
