"""Generic ordered persistence over a single table.

One ``OrderedStore`` wraps one table described by a ``TableSpec``: insert,
partial update, soft-delete via an ``is_active`` flag, parent-scoped ordered
listing, contiguous reordering and an atomic upsert keyed by a unique
constraint. Registries compose a store instead of issuing SQL themselves.

Listing is the single place that applies the active-only filter. Column
names used to build SQL always come from the ``TableSpec`` whitelist; values
are always bound parameters.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import bindparam
from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from talent_questionnaire.logic.errors import ConflictError, NotFoundError, QuestionnaireError, ValidationError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

TIMESTAMP_COLUMNS = ("created_at", "updated_at")


def utc_now_iso() -> str:
    """Fixed-width ISO-8601 UTC timestamp; sorts lexically on SQLite."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _as_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


@dataclass(frozen=True)
class TableSpec:
    """Whitelist and defaults for one table."""

    table: str
    columns: Tuple[str, ...]
    required: Tuple[str, ...] = ()
    json_columns: FrozenSet[str] = frozenset()
    bool_columns: FrozenSet[str] = frozenset()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    active_column: Optional[str] = "is_active"
    sort_key: str = "sort_order"
    tie_break_key: str = "id"

    @property
    def readable(self) -> Tuple[str, ...]:
        return ("id",) + self.columns + TIMESTAMP_COLUMNS


class OrderedStore:
    def __init__(self, engine: Engine, table_spec: TableSpec) -> None:
        self._engine = engine
        self.table_spec = table_spec

    @property
    def engine(self) -> Engine:
        return self._engine

    # ------------------------------------------------------------------
    # encoding
    # ------------------------------------------------------------------

    def _check_columns(self, keys: Iterable[str], *, allowed: Sequence[str]) -> None:
        unknown = sorted(set(keys) - set(allowed))
        if unknown:
            raise ValidationError(
                f"unknown field(s) for {self.table_spec.table}: {', '.join(unknown)}", fields=unknown
            )

    def _encode(self, record: Mapping[str, Any]) -> Record:
        out: Record = {}
        for key, value in record.items():
            if key in self.table_spec.json_columns:
                out[key] = json.dumps(value) if value is not None else None
            elif key in self.table_spec.bool_columns and value is not None:
                out[key] = bool(value)
            else:
                out[key] = value
        return out

    def _decode(self, row: Mapping[str, Any]) -> Record:
        rec: Record = dict(row)
        for key in self.table_spec.json_columns:
            raw = rec.get(key)
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode("utf-8")
            rec[key] = json.loads(raw) if isinstance(raw, str) else raw
        for key in self.table_spec.bool_columns:
            if rec.get(key) is not None:
                rec[key] = bool(rec[key])
        for key in TIMESTAMP_COLUMNS:
            rec[key] = _as_datetime(rec.get(key))
        return rec

    def _where(self, filters: Optional[Mapping[str, Any]], *, active_only: bool) -> Tuple[str, Record, list]:
        clauses: List[str] = []
        params: Record = {}
        expanding: list = []
        for i, (col, value) in enumerate((filters or {}).items()):
            self._check_columns([col], allowed=self.table_spec.readable)
            pname = f"f{i}"
            if value is None:
                clauses.append(f"{col} IS NULL")
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(f"{col} IN :{pname}")
                params[pname] = list(value)
                expanding.append(bindparam(pname, expanding=True))
            else:
                clauses.append(f"{col} = :{pname}")
                params[pname] = self._encode({col: value})[col]
        if active_only and self.table_spec.active_column:
            clauses.append(f"{self.table_spec.active_column} = :active")
            params["active"] = True
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        return where, params, expanding

    def _select_sql(self) -> str:
        return f"SELECT {', '.join(self.table_spec.readable)} FROM {self.table_spec.table}"

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def get_by_id(self, record_id: int) -> Optional[Record]:
        with self._engine.connect() as conn:
            row = conn.execute(
                sql_text(f"{self._select_sql()} WHERE id = :id"), {"id": int(record_id)}
            ).mappings().fetchone()
        return self._decode(row) if row else None

    def list_ordered(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        sort_key: Optional[str] = None,
        tie_break_key: Optional[str] = None,
        *,
        descending: bool = False,
    ) -> List[Record]:
        """Return active rows matching ``filters`` ordered by sort key then tie-break key."""
        if filters:
            for value in filters.values():
                if isinstance(value, (list, tuple, set, frozenset)) and not value:
                    return []
        sort_key = sort_key or self.table_spec.sort_key
        tie_break_key = tie_break_key or self.table_spec.tie_break_key
        self._check_columns([sort_key, tie_break_key], allowed=self.table_spec.readable)
        direction = "DESC" if descending else "ASC"
        where, params, expanding = self._where(filters, active_only=True)
        stmt = sql_text(
            f"{self._select_sql()}{where} ORDER BY {sort_key} {direction}, {tie_break_key} {direction}, id {direction}"
        )
        if expanding:
            stmt = stmt.bindparams(*expanding)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt, params).mappings().all()
        return [self._decode(r) for r in rows]

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    def _prepare_insert(self, record: Mapping[str, Any]) -> Record:
        self._check_columns(record.keys(), allowed=self.table_spec.columns)
        merged: Record = dict(self.table_spec.defaults)
        merged.update({k: v for k, v in record.items() if v is not None or k not in self.table_spec.defaults})
        missing = [
            col
            for col in self.table_spec.required
            if merged.get(col) is None or (isinstance(merged.get(col), str) and not merged[col].strip())
        ]
        if missing:
            raise ValidationError(
                f"missing required field(s) for {self.table_spec.table}: {', '.join(missing)}", fields=missing
            )
        now = utc_now_iso()
        merged["created_at"] = now
        merged["updated_at"] = now
        return merged

    def _returning_sql(self) -> str:
        return f" RETURNING {', '.join(self.table_spec.readable)}"

    def _integrity_failure(self, exc: IntegrityError, action: str) -> QuestionnaireError:
        """Unique violations are conflicts; NOT NULL, CHECK and foreign key failures are bad input."""
        orig = getattr(exc, "orig", None)
        table = self.table_spec.table
        if getattr(orig, "pgcode", None) == "23505" or "unique" in str(orig or exc).lower():
            logger.info("store_%s_conflict table=%s", action, table)
            return ConflictError(f"{table}: uniqueness violated")
        logger.error("store_%s_rejected table=%s", action, table, exc_info=True)
        return ValidationError(f"{table}: required value missing or reference invalid")

    def insert(self, record: Mapping[str, Any]) -> Record:
        """Insert a row, assigning id and timestamps, and return it."""
        merged = self._prepare_insert(record)
        cols = list(merged.keys())
        stmt = sql_text(
            f"INSERT INTO {self.table_spec.table} ({', '.join(cols)}) "
            f"VALUES ({', '.join(':' + c for c in cols)})" + self._returning_sql()
        )
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt, self._encode(merged)).mappings().one()
        except IntegrityError as exc:
            raise self._integrity_failure(exc, "insert") from exc
        return self._decode(row)

    def update(self, record_id: int, fields: Mapping[str, Any]) -> Record:
        """Merge ``fields`` into the row and refresh ``updated_at``."""
        self._check_columns(fields.keys(), allowed=self.table_spec.columns)
        values = self._encode(fields)
        values["updated_at"] = utc_now_iso()
        values["id"] = int(record_id)
        assignments = ", ".join(f"{c} = :{c}" for c in values if c != "id")
        stmt = sql_text(f"UPDATE {self.table_spec.table} SET {assignments} WHERE id = :id" + self._returning_sql())
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt, values).mappings().fetchone()
        except IntegrityError as exc:
            raise self._integrity_failure(exc, "update") from exc
        if row is None:
            raise NotFoundError(f"{self.table_spec.table} {record_id} not found")
        return self._decode(row)

    def soft_delete(self, record_id: int) -> None:
        """Flip the active flag off; deleting an inactive row again is not an error."""
        if not self.table_spec.active_column:
            raise ValidationError(f"{self.table_spec.table} does not support soft delete")
        with self._engine.begin() as conn:
            result = conn.execute(
                sql_text(
                    f"UPDATE {self.table_spec.table} SET {self.table_spec.active_column} = :inactive, updated_at = :now WHERE id = :id"
                ),
                {"inactive": False, "now": utc_now_iso(), "id": int(record_id)},
            )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.table_spec.table} {record_id} not found")

    def upsert(self, record: Mapping[str, Any], conflict_columns: Sequence[str]) -> Record:
        """Insert or update in place in one statement keyed by a unique constraint.

        ``created_at`` survives the update path; every other supplied column
        and ``updated_at`` take the new values. Concurrent callers on the same
        key serialize in the database and never produce a second row.
        """
        self._check_columns(conflict_columns, allowed=self.table_spec.columns)
        merged = self._prepare_insert(record)
        cols = list(merged.keys())
        update_cols = [c for c in cols if c not in conflict_columns and c != "created_at"]
        stmt = sql_text(
            f"INSERT INTO {self.table_spec.table} ({', '.join(cols)}) "
            f"VALUES ({', '.join(':' + c for c in cols)}) "
            f"ON CONFLICT ({', '.join(conflict_columns)}) DO UPDATE SET "
            + ", ".join(f"{c} = excluded.{c}" for c in update_cols)
            + self._returning_sql()
        )
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt, self._encode(merged)).mappings().one()
        except IntegrityError as exc:
            raise self._integrity_failure(exc, "upsert") from exc
        return self._decode(row)

    def delete_where(self, filters: Mapping[str, Any]) -> int:
        """Physically delete matching rows (active or not); returns the row count."""
        if not filters:
            raise ValidationError("refusing to delete without a filter")
        where, params, expanding = self._where(filters, active_only=False)
        stmt = sql_text(f"DELETE FROM {self.table_spec.table}{where}")
        if expanding:
            stmt = stmt.bindparams(*expanding)
        with self._engine.begin() as conn:
            return int(conn.execute(stmt, params).rowcount or 0)

    def reorder(self, ids_in_new_order: Sequence[int], filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """Assign contiguous 1-based sort values in the submitted order.

        Listed ids come first in the given order; active rows in the same
        scope that were not listed follow in their previous order. All
        updates run in one transaction.
        """
        wanted = [int(i) for i in ids_in_new_order]
        if len(set(wanted)) != len(wanted):
            raise ValidationError("reorder ids must not contain duplicates", fields=["ids"])
        current = self.list_ordered(filters)
        current_ids = [int(r["id"]) for r in current]
        stray = [i for i in wanted if i not in current_ids]
        if stray:
            raise ValidationError(
                f"ids not in scope or inactive: {stray}", fields=["ids"]
            )
        final = wanted + [i for i in current_ids if i not in wanted]
        now = utc_now_iso()
        sort_key = self.table_spec.sort_key
        with self._engine.begin() as conn:
            for position, record_id in enumerate(final, start=1):
                conn.execute(
                    sql_text(
                        f"UPDATE {self.table_spec.table} SET {sort_key} = :ord, updated_at = :now WHERE id = :id"
                    ),
                    {"ord": position, "now": now, "id": record_id},
                )
        logger.info("store_reordered table=%s order=%s", self.table_spec.table, final)
        return self.list_ordered(filters)


__all__ = ["OrderedStore", "TableSpec", "Record", "utc_now_iso"]
