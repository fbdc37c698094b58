"""
Notas API — Login Route
========================

What:  POST /login — checks a cedula/password pair.
Why:   The front-end needs the user's record after a successful sign-in.
       No token or session is issued; the client keeps the returned user.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from notas_api.database import Store, get_store
from notas_api.schemas.records import ErrorResponse, LoginCommand, MessageResponse
from notas_api.services.auth_service import auth_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    summary="Sign in with cedula and password",
    responses={
        400: {"description": "cedula or clave missing", "model": MessageResponse},
        401: {"description": "Unknown cedula or wrong password", "model": MessageResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
)
async def login(
    command: Optional[LoginCommand] = None,
    store: Store = Depends(get_store),
):
    """
    Returns {"msg": "Bienvenido", "usuario": {...}} on success.

    The 401 answer is the same whether the cedula is unknown or the
    password is wrong.
    """
    payload = command.model_dump(exclude_unset=True) if command else {}
    return await auth_service.login(store, payload)
