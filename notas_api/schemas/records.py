"""
Notas API — Pydantic Request/Response Schemas
==============================================

What:  Request bodies accepted by the write endpoints and the error/status
       shapes returned by the API.
Why:   FastAPI parses bodies into these models and documents them in OpenAPI.
How:   Every command field is optional at the schema level. Presence rules
       ("cedula and nombre are required on create") belong to the resource
       services, which answer them with a 400 and a Spanish message instead
       of FastAPI's generic 422.

Only the keys a client actually sent are forwarded to the services
(`model_dump(exclude_unset=True)`), so "field omitted" and "field sent as
null" stay distinguishable. Grades rely on that: `calificacion: null` is
accepted, a body without `calificacion` is not.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Commands: what clients send
# ══════════════════════════════════════════════════════════════════════════


class _Command(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _TextCommand(_Command):
    # Numeric cedulas ("12345678") arrive as JSON numbers from some clients
    model_config = ConfigDict(coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _falsy_number_is_absent(cls, value: Any) -> Any:
        # 0 and false must fail the presence rules, not become "0"
        if isinstance(value, (int, float)) and not value:
            return None
        return value


class LoginCommand(_TextCommand):
    cedula: Optional[str] = Field(default=None, description="National id of the user")
    clave: Optional[str] = Field(default=None, description="Plain-text password")


class UsuarioCommand(_TextCommand):
    """Body of POST/PUT /usuarios. `clave` is hashed before storage."""
    cedula: Optional[str] = Field(default=None, description="National id (unique)")
    nombre: Optional[str] = Field(default=None, description="Display name")
    clave: Optional[str] = Field(default=None, description="Plain-text password")


class MateriaCommand(_TextCommand):
    nombre_materia: Optional[str] = Field(default=None, description="Subject name")


class EstudianteCommand(_TextCommand):
    cedula: Optional[str] = Field(default=None, description="Student national id")
    nombre: Optional[str] = Field(default=None, description="Student name")
    correo: Optional[str] = Field(default=None, description="Contact e-mail (optional)")


class NotaCommand(_Command):
    """
    Body of POST/PUT /notas.

    Values are passed to the database as sent; a dangling reference or a
    score the column cannot hold is rejected there (500).
    """
    id_estudiante: Any = Field(default=None, description="estudiantes.id")
    id_materia: Any = Field(default=None, description="materia.id_materia")
    calificacion: Any = Field(default=None, description="Score")


# ══════════════════════════════════════════════════════════════════════════
# Responses: error and status bodies
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """
    Body of confirmations and of 400/401/404 answers.

    Example:
        {"msg": "Materia no encontrada"}
    """
    msg: str = Field(description="Human-readable message (Spanish)")
    detail: Optional[List[Any]] = Field(
        default=None, description="Parser errors, only for malformed requests"
    )


class ErrorResponse(BaseModel):
    """
    Body of 500 answers. `error` is the underlying message, unmodified.

    Example:
        {"error": "insert or update on table \\"notas\\" violates foreign key constraint ..."}
    """
    error: str = Field(description="Error message")


class RouteNotFoundResponse(BaseModel):
    error: str = Field(description="Always 'Ruta no encontrada'")
    path: str = Field(description="Requested path")
    method: str = Field(description="Requested HTTP method")


class RootResponse(BaseModel):
    msg: str
    timestamp: datetime
    endpoints: List[str]


class HealthResponse(BaseModel):
    """
    Health check response.

    A backend that cannot reach its database cannot serve a single route,
    so database connectivity decides the overall status.
    """
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
