"""
Notas API — Resource Route Handlers
====================================

What:  CRUD endpoints for /usuarios, /materias, /estudiantes and /notas.
How:   `build_router()` mounts the same five endpoints for any
       ResourceService; each handler only unpacks the request and delegates.

Route Inventory (per resource prefix):
    GET    {prefix}            list, fixed ordering
    GET    {prefix}/{item_id}  one row                      404 if missing
    POST   {prefix}            create                       400 if incomplete
    PUT    {prefix}/{item_id}  full replace                 404 if missing
    DELETE {prefix}/{item_id}  remove                       404 if missing

Errors raised by the services are formatted by the global exception
handlers in main.py.
"""

from typing import Optional, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from notas_api.database import Store, get_store
from notas_api.schemas.records import (
    ErrorResponse,
    EstudianteCommand,
    MateriaCommand,
    MessageResponse,
    NotaCommand,
    UsuarioCommand,
)
from notas_api.services.resource_service import ResourceService
from notas_api.services.resources import (
    estudiantes_service,
    materias_service,
    notas_service,
    usuarios_service,
)


_STORE_FAILURE = {500: {"description": "Database error", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "No row with this id", "model": MessageResponse}}


def build_router(
    service: ResourceService,
    command_model: Type[BaseModel],
    prefix: str,
    tag: str,
) -> APIRouter:
    """
    Creates the five CRUD endpoints for one resource.

    Args:
        service:       Resource service doing the work
        command_model: Pydantic model of the POST/PUT body
        prefix:        URL prefix, e.g. "/materias"
        tag:           OpenAPI tag
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    table = service.resource.table

    # Handlers return plain dicts so FastAPI's encoder turns NUMERIC
    # columns (Decimal) into JSON numbers.

    @router.get("", summary=f"List {table}", responses=_STORE_FAILURE)
    async def list_items(store: Store = Depends(get_store)):
        return await service.list(store)

    @router.get(
        "/{item_id}",
        summary=f"Get one row of {table}",
        responses={**_NOT_FOUND, **_STORE_FAILURE},
    )
    async def get_item(item_id: int, store: Store = Depends(get_store)):
        return await service.get(store, item_id)

    @router.post(
        "",
        summary=f"Create a row in {table}",
        responses={
            400: {"description": "Required field missing", "model": MessageResponse},
            **_STORE_FAILURE,
        },
    )
    async def create_item(
        command: Optional[command_model] = None,  # type: ignore[valid-type]
        store: Store = Depends(get_store),
    ):
        payload = command.model_dump(exclude_unset=True) if command else {}
        return await service.create(store, payload)

    @router.put(
        "/{item_id}",
        summary=f"Replace a row of {table}",
        description="Every writable field is overwritten; omitted fields become null.",
        responses={**_NOT_FOUND, **_STORE_FAILURE},
    )
    async def update_item(
        item_id: int,
        command: Optional[command_model] = None,  # type: ignore[valid-type]
        store: Store = Depends(get_store),
    ):
        payload = command.model_dump(exclude_unset=True) if command else {}
        return await service.update(store, item_id, payload)

    @router.delete(
        "/{item_id}",
        summary=f"Delete a row of {table}",
        response_model=MessageResponse,
        response_model_exclude_none=True,
        responses={**_NOT_FOUND, **_STORE_FAILURE},
    )
    async def delete_item(item_id: int, store: Store = Depends(get_store)):
        return await service.delete(store, item_id)

    return router


usuarios_router = build_router(usuarios_service, UsuarioCommand, "/usuarios", "Usuarios")
materias_router = build_router(materias_service, MateriaCommand, "/materias", "Materias")
estudiantes_router = build_router(estudiantes_service, EstudianteCommand, "/estudiantes", "Estudiantes")
notas_router = build_router(notas_service, NotaCommand, "/notas", "Notas")
