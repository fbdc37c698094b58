"""
Notas API — Login Service
==========================

What:  Checks a cedula/password pair against the usuarios table.
Why:   Login is not a generic read: it looks up by natural key, verifies the
       password hash, and must fail identically for an unknown cedula and for
       a wrong password.
How:   One SELECT by cedula, then CredentialGuard.verify; the matched row is
       redacted before it is returned.

Failure modes:
    cedula or clave missing        → ValidationError   (400)
    unknown cedula / bad password  → UnauthorizedError (401, same message)
"""

import logging
from typing import Any, Dict, Mapping

from notas_api.database import Store
from notas_api.exceptions import UnauthorizedError, ValidationError
from notas_api.services.credentials import CREDENTIAL_FIELD, CredentialGuard, credential_guard
from notas_api.services.resource_service import is_present

logger = logging.getLogger(__name__)

LOOKUP_SQL = "SELECT * FROM usuarios WHERE cedula = :cedula"


class AuthService:
    """Stateless login check; the store is passed per call."""

    def __init__(self, guard: CredentialGuard):
        self.guard = guard

    async def login(self, store: Store, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Authenticates a user.

        Returns:
            {"msg": "Bienvenido", "usuario": <row without clave>}

        Raises:
            ValidationError:   cedula or clave missing
            UnauthorizedError: no such cedula, or the password does not match
        """
        cedula = payload.get("cedula")
        clave = payload.get(CREDENTIAL_FIELD)
        if not is_present(cedula) or not is_present(clave):
            raise ValidationError(message="Cédula y contraseña son requeridas")

        rows = await store.execute(LOOKUP_SQL, {"cedula": cedula})
        # An unknown cedula is verified against no hash, which costs the same
        stored_hash = rows[0].get(CREDENTIAL_FIELD) if rows else None
        if not await self.guard.verify(clave, stored_hash):
            logger.warning("Login rejected")
            raise UnauthorizedError()

        usuario = self.guard.redact(rows[0])
        logger.info("Login successful: %s", usuario.get("cedula"))
        return {"msg": "Bienvenido", "usuario": usuario}


auth_service = AuthService(credential_guard)
