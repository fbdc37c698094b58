"""
Notas API — Resource Service Unit Tests
========================================

What:  Tests for the generic List/Get/Create/Update/Delete contract and its
       four configured resources.
How:   FakeStore from conftest records statements and returns scripted rows
       (no database needed).

What we test:
    ✅ Statements built from the resource description
    ✅ Missing required fields raise ValidationError before any statement runs
    ✅ Update writes every writable field, NULL for omitted ones
    ✅ Zero matched rows raise NotFoundError for get/update/delete
    ✅ Users are hashed on write and redacted on every read
"""

import pytest

from notas_api.exceptions import NotFoundError, ValidationError
from notas_api.services.resources import (
    estudiantes_service,
    materias_service,
    notas_service,
    usuarios_service,
)


class TestStatements:
    """The SQL each service runs is fixed at construction time."""

    def test_materia_statements(self):
        assert materias_service.list_sql == "SELECT * FROM materia ORDER BY id_materia ASC"
        assert materias_service.get_sql == "SELECT * FROM materia WHERE id_materia = :item_id"
        assert materias_service.insert_sql == (
            "INSERT INTO materia (nombre_materia) VALUES (:nombre_materia) RETURNING *"
        )
        assert materias_service.update_sql == (
            "UPDATE materia SET nombre_materia = :nombre_materia "
            "WHERE id_materia = :item_id RETURNING *"
        )
        assert materias_service.delete_sql == (
            "DELETE FROM materia WHERE id_materia = :item_id RETURNING id_materia"
        )

    def test_list_orderings(self):
        assert usuarios_service.list_sql.endswith("ORDER BY id ASC")
        assert estudiantes_service.list_sql.endswith("ORDER BY nombre ASC")
        assert notas_service.list_sql.rstrip().endswith("ORDER BY n.id_nota DESC")

    def test_notas_reads_join_names(self):
        assert "e.nombre AS nombre_estudiante" in notas_service.list_sql
        list_columns = notas_service.list_sql.split("FROM")[0]
        get_columns = notas_service.get_sql.split("FROM")[0]
        assert "n.id_estudiante" not in list_columns
        assert "n.id_estudiante" in get_columns
        assert "n.id_materia" in get_columns
        assert "WHERE n.id_nota = :item_id" in notas_service.get_sql


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_materia(self, fake_store):
        fake_store.queue([{"id_materia": 7, "nombre_materia": "Math"}])

        result = await materias_service.create(fake_store, {"nombre_materia": "Math"})

        assert result == {
            "msg": "Materia registrada",
            "data": {"id_materia": 7, "nombre_materia": "Math"},
        }
        assert fake_store.calls == [(materias_service.insert_sql, {"nombre_materia": "Math"})]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"nombre_materia": ""}, {"nombre_materia": None}])
    async def test_create_materia_missing_name(self, fake_store, payload):
        with pytest.raises(ValidationError) as exc_info:
            await materias_service.create(fake_store, payload)

        assert exc_info.value.message == "El nombre de la materia es obligatorio"
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_create_estudiante_without_correo(self, fake_store):
        fake_store.queue([{"id": 1, "cedula": "E-1", "nombre": "Ana", "correo": None}])

        await estudiantes_service.create(fake_store, {"cedula": "E-1", "nombre": "Ana"})

        assert fake_store.calls[0][1] == {"cedula": "E-1", "nombre": "Ana", "correo": None}

    @pytest.mark.asyncio
    async def test_create_estudiante_missing_cedula(self, fake_store):
        with pytest.raises(ValidationError) as exc_info:
            await estudiantes_service.create(fake_store, {"nombre": "Ana"})

        assert exc_info.value.message == "Cédula y nombre son obligatorios"
        assert exc_info.value.fields == ["cedula"]
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_create_nota_accepts_zero_and_null_score(self, fake_store):
        """calificacion only has to be present in the body."""
        fake_store.queue([{"id_nota": 1}], [{"id_nota": 2}])

        await notas_service.create(
            fake_store, {"id_estudiante": 1, "id_materia": 1, "calificacion": 0}
        )
        await notas_service.create(
            fake_store, {"id_estudiante": 1, "id_materia": 1, "calificacion": None}
        )

        assert len(fake_store.calls) == 2

    @pytest.mark.asyncio
    async def test_create_nota_without_score(self, fake_store):
        with pytest.raises(ValidationError) as exc_info:
            await notas_service.create(fake_store, {"id_estudiante": 1, "id_materia": 1})

        assert exc_info.value.fields == ["calificacion"]
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_create_nota_with_zero_reference(self, fake_store):
        with pytest.raises(ValidationError):
            await notas_service.create(
                fake_store, {"id_estudiante": 0, "id_materia": 1, "calificacion": 10}
            )

    @pytest.mark.asyncio
    async def test_create_usuario_hashes_and_redacts(self, fake_store):
        fake_store.queue([{"id": 3, "cedula": "V-123", "nombre": "Ana", "clave": "$2b$04$x"}])

        result = await usuarios_service.create(
            fake_store, {"cedula": "V-123", "nombre": "Ana", "clave": "secret1"}
        )

        written = fake_store.calls[0][1]
        assert written["clave"] != "secret1"
        assert written["clave"].startswith("$2b$")
        assert result["msg"] == "Usuario registrado"
        assert result["data"] == {"id": 3, "cedula": "V-123", "nombre": "Ana"}


class TestRead:

    @pytest.mark.asyncio
    async def test_list_usuarios_redacted(self, fake_store):
        fake_store.queue([
            {"id": 1, "cedula": "V-1", "nombre": "Ana", "clave": "h1"},
            {"id": 2, "cedula": "V-2", "nombre": "Luis", "clave": "h2"},
        ])

        rows = await usuarios_service.list(fake_store)

        assert all("clave" not in row for row in rows)
        assert [row["id"] for row in rows] == [1, 2]

    @pytest.mark.asyncio
    async def test_get_found(self, fake_store):
        fake_store.queue([{"id": 4, "cedula": "E-4", "nombre": "Ana", "correo": None}])

        row = await estudiantes_service.get(fake_store, 4)

        assert row["id"] == 4
        assert fake_store.calls == [(estudiantes_service.get_sql, {"item_id": 4})]

    @pytest.mark.asyncio
    async def test_get_usuario_redacted(self, fake_store):
        fake_store.queue([{"id": 1, "cedula": "V-1", "nombre": "Ana", "clave": "h1"}])

        row = await usuarios_service.get(fake_store, 1)

        assert "clave" not in row

    @pytest.mark.asyncio
    async def test_get_not_found(self, fake_store):
        with pytest.raises(NotFoundError) as exc_info:
            await notas_service.get(fake_store, 99)

        assert exc_info.value.message == "Nota no encontrada"


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_is_full_replace(self, fake_store):
        fake_store.queue([{"id": 1, "cedula": "E-1", "nombre": "Ana", "correo": None}])

        result = await estudiantes_service.update(fake_store, 1, {"cedula": "E-1", "nombre": "Ana"})

        assert fake_store.calls[0] == (
            estudiantes_service.update_sql,
            {"cedula": "E-1", "nombre": "Ana", "correo": None, "item_id": 1},
        )
        assert result["msg"] == "Estudiante actualizado"
        assert result["estudiante"]["correo"] is None

    @pytest.mark.asyncio
    async def test_update_does_not_validate(self, fake_store):
        """An empty body still reaches the store; every column becomes NULL."""
        fake_store.queue([{"id_materia": 2, "nombre_materia": None}])

        await materias_service.update(fake_store, 2, {})

        assert fake_store.calls[0][1] == {"nombre_materia": None, "item_id": 2}

    @pytest.mark.asyncio
    async def test_update_not_found(self, fake_store):
        with pytest.raises(NotFoundError) as exc_info:
            await materias_service.update(fake_store, 5, {"nombre_materia": "Art"})

        assert exc_info.value.message == "Materia no encontrada"

    @pytest.mark.asyncio
    async def test_update_usuario_envelope_key_and_hash(self, fake_store):
        fake_store.queue([{"id": 1, "cedula": "V-1", "nombre": "Ana", "clave": "h"}])

        result = await usuarios_service.update(
            fake_store, 1, {"cedula": "V-1", "nombre": "Ana", "clave": "nueva"}
        )

        assert fake_store.calls[0][1]["clave"].startswith("$2b$")
        assert result == {
            "msg": "Usuario actualizado",
            "usuario": {"id": 1, "cedula": "V-1", "nombre": "Ana"},
        }

    @pytest.mark.asyncio
    async def test_update_usuario_without_clave_writes_null(self, fake_store):
        fake_store.queue([{"id": 1, "cedula": "V-1", "nombre": "Ana", "clave": None}])

        await usuarios_service.update(fake_store, 1, {"cedula": "V-1", "nombre": "Ana"})

        assert fake_store.calls[0][1]["clave"] is None


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete(self, fake_store):
        fake_store.queue([{"id_nota": 3}])

        result = await notas_service.delete(fake_store, 3)

        assert result == {"msg": "Nota eliminada"}
        assert fake_store.calls == [(notas_service.delete_sql, {"item_id": 3})]

    @pytest.mark.asyncio
    async def test_delete_not_found(self, fake_store):
        with pytest.raises(NotFoundError) as exc_info:
            await usuarios_service.delete(fake_store, 3)

        assert exc_info.value.message == "Usuario no encontrado"
