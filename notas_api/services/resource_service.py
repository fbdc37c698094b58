"""
Notas API — Generic Resource Service
=====================================

What:  List / Get / Create / Update / Delete over one table, configured per
       resource (usuarios, materia, estudiantes, notas).
Why:   Every resource follows the same contract: validate the body, run one
       parameterized statement, map the outcome to a response envelope or to
       an application exception. Writing that once keeps the four resources
       behaviourally identical.
How:   A `Resource` describes the table (name, id column, writable fields,
       required fields, ORDER BY, optional row shaper and write hook).
       `ResourceService` builds the five statements from it once and runs
       exactly one of them per call.

Outcome mapping:
    missing required field  → ValidationError  (store never touched)
    zero rows matched       → NotFoundError
    driver failure          → StoreError       (raised by Store.execute)

Update semantics:
    Update is a full replace. Every writable column is written from the body;
    a field left out of the body is written as NULL rather than preserved.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from notas_api.database import Row, Store
from notas_api.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _keep_row(row: Row) -> Row:
    return row


def is_present(value: Any) -> bool:
    """
    Presence test for required text/reference fields.

    None, "", 0 and False all count as missing, the same rule browsers'
    JavaScript clients were written against.
    """
    return bool(value)


@dataclass(frozen=True)
class Messages:
    """User-facing texts for one resource."""
    created: str
    updated: str
    deleted: str
    not_found: str
    missing: str


@dataclass(frozen=True)
class Resource:
    """
    Static description of one table exposed over HTTP.

    Attributes:
        name:            Singular name, used for logging and as the key of
                         the updated row in the Update envelope
        table:           Table name
        id_column:       Surrogate primary key column
        fields:          Writable columns, in statement order
        required:        Fields that must be present (truthy) on Create
        defined:         Fields that must merely appear in the body on Create
                         (an explicit null is accepted)
        order_by:        Fixed ORDER BY clause for List
        messages:        Response texts
        list_statement:  Replaces the default `SELECT *` for List
        get_statement:   Replaces the default `SELECT *` for Get; must bind
                         `:item_id`
        shape_row:       Applied to every row before it leaves the service
        prepare_write:   Async hook turning validated values into the values
                         actually written (e.g. hashing a password)
    """
    name: str
    table: str
    id_column: str
    fields: Tuple[str, ...]
    required: Tuple[str, ...]
    order_by: str
    messages: Messages
    defined: Tuple[str, ...] = ()
    list_statement: Optional[str] = None
    get_statement: Optional[str] = None
    shape_row: Callable[[Row], Row] = _keep_row
    prepare_write: Optional[Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]] = None


class ResourceService:
    """
    Runs the five operations of one `Resource` against a `Store`.

    The store is passed per call (it is request-scoped from the router's
    point of view); the service itself holds no mutable state.
    """

    def __init__(self, resource: Resource):
        self.resource = resource
        table, pk = resource.table, resource.id_column
        columns = ", ".join(resource.fields)
        binds = ", ".join(f":{field}" for field in resource.fields)
        assignments = ", ".join(f"{field} = :{field}" for field in resource.fields)

        self.list_sql = resource.list_statement or (
            f"SELECT * FROM {table} ORDER BY {resource.order_by}"
        )
        self.get_sql = resource.get_statement or (
            f"SELECT * FROM {table} WHERE {pk} = :item_id"
        )
        self.insert_sql = f"INSERT INTO {table} ({columns}) VALUES ({binds}) RETURNING *"
        self.update_sql = f"UPDATE {table} SET {assignments} WHERE {pk} = :item_id RETURNING *"
        self.delete_sql = f"DELETE FROM {table} WHERE {pk} = :item_id RETURNING {pk}"

    # ── Helpers ───────────────────────────────────────────────────────────

    def validate(self, payload: Mapping[str, Any]) -> None:
        """Raises ValidationError naming every missing field."""
        missing = [f for f in self.resource.required if not is_present(payload.get(f))]
        missing += [f for f in self.resource.defined if f not in payload]
        if missing:
            raise ValidationError(message=self.resource.messages.missing, fields=missing)

    def values(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Full-replace value set: every writable field, None when absent."""
        return {field: payload.get(field) for field in self.resource.fields}

    async def _prepared(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values = self.values(payload)
        if self.resource.prepare_write is not None:
            values = await self.resource.prepare_write(values)
        return values

    def _not_found(self, item_id: int) -> NotFoundError:
        return NotFoundError(
            message=self.resource.messages.not_found,
            resource=self.resource.name,
            resource_id=item_id,
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def list(self, store: Store) -> List[Row]:
        rows = await store.execute(self.list_sql)
        return [self.resource.shape_row(row) for row in rows]

    async def get(self, store: Store, item_id: int) -> Row:
        rows = await store.execute(self.get_sql, {"item_id": item_id})
        if not rows:
            raise self._not_found(item_id)
        return self.resource.shape_row(rows[0])

    async def create(self, store: Store, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validates `payload` and inserts one row.

        Args:
            store:   Store to write to
            payload: Request body restricted to the fields the client sent

        Returns:
            {"msg": <created message>, "data": <stored row>}

        Raises:
            ValidationError: A required field is missing (no statement runs)
        """
        self.validate(payload)
        values = await self._prepared(payload)
        rows = await store.execute(self.insert_sql, values)
        row = self.resource.shape_row(rows[0])
        logger.info("%s created: %s=%s", self.resource.name, self.resource.id_column,
                    row.get(self.resource.id_column))
        return {"msg": self.resource.messages.created, "data": row}

    async def update(
        self, store: Store, item_id: int, payload: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Replaces every writable column of row `item_id`.

        No presence validation happens here: omitted fields are written as
        NULL, and the database decides whether that is acceptable.
        """
        values = await self._prepared(payload)
        values["item_id"] = item_id
        rows = await store.execute(self.update_sql, values)
        if not rows:
            raise self._not_found(item_id)
        logger.info("%s updated: %s=%s", self.resource.name, self.resource.id_column, item_id)
        return {"msg": self.resource.messages.updated, self.resource.name: self.resource.shape_row(rows[0])}

    async def delete(self, store: Store, item_id: int) -> Dict[str, Any]:
        rows = await store.execute(self.delete_sql, {"item_id": item_id})
        if not rows:
            raise self._not_found(item_id)
        logger.info("%s deleted: %s=%s", self.resource.name, self.resource.id_column, item_id)
        return {"msg": self.resource.messages.deleted}
