"""
Notas API — Resource Catalog
=============================

The four tables exposed by the API, each described once as a `Resource`
and wrapped in a `ResourceService` singleton.

    usuarios     id          cedula, nombre, clave            ORDER BY id ASC
    materia      id_materia  nombre_materia                   ORDER BY id_materia ASC
    estudiantes  id          cedula, nombre, correo           ORDER BY nombre ASC
    notas        id_nota     id_estudiante, id_materia,       ORDER BY id_nota DESC
                             calificacion

Users never leave the service with their password hash (`shape_row`), and
their password is hashed before it is written (`prepare_write`). Grades are
read through joins so clients see student and subject names.
"""

from typing import Any, Dict

from notas_api.services.credentials import CREDENTIAL_FIELD, credential_guard
from notas_api.services.resource_service import Messages, Resource, ResourceService


async def _hash_credential(values: Dict[str, Any]) -> Dict[str, Any]:
    # An update without a password writes NULL like any other omitted field
    raw = values.get(CREDENTIAL_FIELD)
    if raw:
        values[CREDENTIAL_FIELD] = await credential_guard.issue(raw)
    return values


USUARIOS = Resource(
    name="usuario",
    table="usuarios",
    id_column="id",
    fields=("cedula", "nombre", "clave"),
    required=("cedula", "nombre", "clave"),
    order_by="id ASC",
    messages=Messages(
        created="Usuario registrado",
        updated="Usuario actualizado",
        deleted="Usuario eliminado",
        not_found="Usuario no encontrado",
        missing="Todos los campos son obligatorios",
    ),
    shape_row=credential_guard.redact,
    prepare_write=_hash_credential,
)

MATERIAS = Resource(
    name="materia",
    table="materia",
    id_column="id_materia",
    fields=("nombre_materia",),
    required=("nombre_materia",),
    order_by="id_materia ASC",
    messages=Messages(
        created="Materia registrada",
        updated="Materia actualizada",
        deleted="Materia eliminada",
        not_found="Materia no encontrada",
        missing="El nombre de la materia es obligatorio",
    ),
)

ESTUDIANTES = Resource(
    name="estudiante",
    table="estudiantes",
    id_column="id",
    fields=("cedula", "nombre", "correo"),
    required=("cedula", "nombre"),
    order_by="nombre ASC",
    messages=Messages(
        created="Estudiante registrado",
        updated="Estudiante actualizado",
        deleted="Estudiante eliminado",
        not_found="Estudiante no encontrado",
        missing="Cédula y nombre son obligatorios",
    ),
)

_NOTAS_SELECT = """
    SELECT
        n.id_nota,
        e.nombre AS nombre_estudiante,
        m.nombre_materia,
        n.calificacion{extra}
    FROM notas n
    JOIN estudiantes e ON n.id_estudiante = e.id
    JOIN materia m ON n.id_materia = m.id_materia
"""

NOTAS = Resource(
    name="nota",
    table="notas",
    id_column="id_nota",
    fields=("id_estudiante", "id_materia", "calificacion"),
    required=("id_estudiante", "id_materia"),
    defined=("calificacion",),
    order_by="id_nota DESC",
    messages=Messages(
        created="Nota registrada con éxito",
        updated="Nota actualizada",
        deleted="Nota eliminada",
        not_found="Nota no encontrada",
        missing="Todos los campos son obligatorios",
    ),
    list_statement=_NOTAS_SELECT.format(extra="") + "    ORDER BY n.id_nota DESC",
    # Raw references are included so the client can pre-fill an edit form
    get_statement=(
        _NOTAS_SELECT.format(extra=",\n        n.id_estudiante,\n        n.id_materia")
        + "    WHERE n.id_nota = :item_id"
    ),
)


usuarios_service = ResourceService(USUARIOS)
materias_service = ResourceService(MATERIAS)
estudiantes_service = ResourceService(ESTUDIANTES)
notas_service = ResourceService(NOTAS)
