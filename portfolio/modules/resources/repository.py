from supabase import Client
from pydantic import BaseModel, ValidationError as RecordValidationError
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging
import uuid

from portfolio.core.errors import RemoteError
from portfolio.modules.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResourceRepository:
    """Maps one resource schema onto its Supabase table. Nothing is retried."""

    def __init__(self, supabase: Client, schema: ResourceSchema):
        self.supabase = supabase
        self.schema = schema

    @property
    def table(self) -> str:
        return self.schema.table

    def _to_record(self, row: Dict[str, Any], operation: str) -> BaseModel:
        try:
            return self.schema.record_model(**row)
        except RecordValidationError as e:
            logger.error(f"Malformed {self.table} row {row.get('id')}: {e}")
            raise RemoteError(
                f"Malformed {self.schema.label.lower()} {row.get('id')} returned by {self.table}",
                table=self.table,
                operation=operation,
            ) from e

    def list(self, order_by: Optional[str] = None, ascending: Optional[bool] = None) -> List[BaseModel]:
        """Fetch every row ordered by `order_by` (schema default when omitted)."""
        order_by = order_by or self.schema.order_by
        ascending = self.schema.ascending if ascending is None else ascending
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .order(order_by, desc=not ascending)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing {self.table}: {e}")
            raise RemoteError(f"Failed to load {self.table}: {e}", table=self.table, operation="list") from e
        records = []
        for row in result.data or []:
            try:
                records.append(self._to_record(row, "list"))
            except RemoteError:
                continue  # logged in _to_record
        return records

    def first(self) -> Optional[BaseModel]:
        """Return the first row of an unordered limit 1 query, or None when the table is empty."""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading first row of {self.table}: {e}")
            raise RemoteError(f"Failed to load {self.table}: {e}", table=self.table, operation="first") from e
        if not result.data:
            return None
        return self._to_record(result.data[0], "first")

    def get(self, record_id: str) -> BaseModel:
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", record_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading {self.table} {record_id}: {e}")
            raise RemoteError(f"Failed to load {self.schema.label.lower()}: {e}", table=self.table, operation="get") from e
        if not result.data:
            raise RemoteError(
                f"{self.schema.label} {record_id} not found", table=self.table, operation="get", status_code=404
            )
        return self._to_record(result.data[0], "get")

    def create(self, draft: Dict[str, Any]) -> BaseModel:
        """Insert a new row; identity and timestamps are assigned here, not by the caller."""
        now = utc_now_iso()
        row = {
            **draft,
            "id": str(uuid.uuid4()),
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating {self.table} row: {e}")
            raise RemoteError(f"Failed to create {self.schema.label.lower()}: {e}", table=self.table, operation="create") from e
        if not result.data:
            raise RemoteError(f"Failed to create {self.schema.label.lower()}", table=self.table, operation="create")
        logger.info(f"Created {self.table} row {row['id']}")
        return self._to_record(result.data[0], "create")

    def update(self, record_id: str, fields: Dict[str, Any]) -> BaseModel:
        update_data = {k: v for k, v in fields.items() if k not in ("id", "created_at")}
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table(self.table)\
                .update(update_data)\
                .eq("id", record_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating {self.table} {record_id}: {e}")
            raise RemoteError(f"Failed to update {self.schema.label.lower()}: {e}", table=self.table, operation="update") from e
        if not result.data:
            raise RemoteError(
                f"{self.schema.label} {record_id} not found", table=self.table, operation="update", status_code=404
            )
        logger.info(f"Updated {self.table} row {record_id}")
        return self._to_record(result.data[0], "update")

    def delete(self, record_id: str) -> None:
        try:
            result = self.supabase.table(self.table)\
                .delete()\
                .eq("id", record_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting {self.table} {record_id}: {e}")
            raise RemoteError(f"Failed to delete {self.schema.label.lower()}: {e}", table=self.table, operation="delete") from e
        if not result.data:
            raise RemoteError(
                f"{self.schema.label} {record_id} not found", table=self.table, operation="delete", status_code=404
            )
        logger.info(f"Deleted {self.table} row {record_id}")
