"""
Notas API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the failure states of a request.
Why:   Services raise one exception per failure state; global handlers
       (registered in main.py) turn each into its HTTP status and body.
How:   Each exception carries a message and an optional context dict.
Who:   Raised by services and the store; caught by global handlers.

Exception Hierarchy:
    NotasError (base)
    ├── ValidationError    → 400 Bad Request   {"msg": ...}
    ├── NotFoundError      → 404 Not Found     {"msg": ...}
    ├── UnauthorizedError  → 401 Unauthorized  {"msg": ...}
    └── StoreError         → 500 Server Error  {"error": <driver message>}

    Anything else that escapes a route is answered by the catch-all
    handler with 500 {"error": str(exc)}.
"""

from typing import Any, Dict, List, Optional


class NotasError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Text returned to the client
        context:  Extra debug info (logged, never returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotasError):
    """
    Raised when a write command is missing required fields.

    HTTP:    400 Bad Request
    Raised before any statement reaches the store.
    """

    def __init__(
        self,
        message: str = "Todos los campos son obligatorios",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class NotFoundError(NotasError):
    """
    Raised when a surrogate id does not resolve to a row.

    HTTP:    404 Not Found
    When:    Get-by-id, Update and Delete that matched zero rows.
    """

    def __init__(
        self,
        message: str = "No encontrado",
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UnauthorizedError(NotasError):
    """
    Raised when a login attempt fails.

    HTTP:    401 Unauthorized
    The same message is used for an unknown cedula and for a wrong
    password, so a client cannot probe which cedulas exist.
    """

    def __init__(
        self,
        message: str = "Cédula o contraseña incorrecta",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(NotasError):
    """
    Raised when the database rejects or cannot run a statement.

    HTTP:    500 Internal Server Error
    The driver's message is passed through to the client unchanged,
    including constraint violations such as a grade pointing at a
    student that does not exist.
    """

    def __init__(
        self,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
