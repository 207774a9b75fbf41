# -*- coding: utf-8 -*-
"""
Integration тесты API пользователей
"""

import pytest
from httpx import AsyncClient

from tests.fixtures import (INSTITUTION, auth_headers, create_group,
                            create_student, create_teacher)


def _student_payload(**kw) -> dict:
    payload = {
        "fullName": "Петров Петр Петрович",
        "email": "student@example.com",
        "role": "student",
        "institution": INSTITUTION,
        "groupNumber": "101",
    }
    payload.update(kw)
    return payload


class TestRegistrationAPI:
    """Integration тесты регистрации"""

    @pytest.mark.asyncio
    async def test_register_teacher(self, client: AsyncClient):
        """Преподаватель регистрируется без группы"""
        # Act
        response = await client.post(
            "/api/v1/users",
            json={
                "fullName": "Иванова Мария Сергеевна",
                "email": "Teacher@Example.com",
                "role": "teacher",
                "institution": INSTITUTION,
                "groupNumber": "101",
            },
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["email"] == "teacher@example.com"
        assert data["role"] == "teacher"
        assert data["groupNumber"] is None

    @pytest.mark.asyncio
    async def test_register_student_from_roster(self, client: AsyncClient, store):
        """Студент из списка группы регистрируется и связывается с записью"""
        teacher = await create_teacher(store)
        group = await create_group(store, teacher.id)

        response = await client.post("/api/v1/users", json=_student_payload())

        assert response.status_code == 201
        student_id = response.json()["id"]
        assert (await store.get_group(group.id)).students[0].user_id == student_id

    @pytest.mark.asyncio
    async def test_register_student_not_in_roster(self, client: AsyncClient, store):
        """Студента нет в списках групп"""
        teacher = await create_teacher(store)
        await create_group(store, teacher.id)

        response = await client.post(
            "/api/v1/users", json=_student_payload(groupNumber="999")
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"
        assert "преподаватель" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_register_incomplete_name(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/users", json=_student_payload(fullName="Петров Петр")
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, store):
        await create_teacher(store, email="taken@example.com")

        response = await client.post(
            "/api/v1/users",
            json={
                "fullName": "Иванова Мария Сергеевна",
                "email": "taken@example.com",
                "role": "teacher",
                "institution": INSTITUTION,
            },
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_register_invalid_body(self, client: AsyncClient):
        """Некорректное тело запроса возвращает 400"""
        response = await client.post(
            "/api/v1/users", json=_student_payload(email="no-at-sign", role="admin")
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestUsersAccessAPI:
    """Доступ к данным пользователей"""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, store):
        student = await create_student(store)

        response = await client.get("/api/v1/users/me", headers=auth_headers(student))

        assert response.status_code == 200
        assert response.json()["fullName"] == student.full_name

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["error_code"] == "HTTP_401"

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, client: AsyncClient, store):
        ghost = (await create_student(store)).model_copy(update={"id": 999})

        response = await client.get("/api/v1/users/me", headers=auth_headers(ghost))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_users_teacher_only(self, client: AsyncClient, store):
        teacher = await create_teacher(store)
        student = await create_student(store)

        as_teacher = await client.get("/api/v1/users", headers=auth_headers(teacher))
        as_student = await client.get("/api/v1/users", headers=auth_headers(student))

        assert as_teacher.status_code == 200
        assert {u["id"] for u in as_teacher.json()} == {teacher.id, student.id}
        assert as_student.status_code == 403
