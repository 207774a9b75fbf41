# EduTest/edutest/api/v1/users/schemas.py
from typing import Optional

from pydantic import ConfigDict

from edutest.domain.entities import UserBase
from edutest.domain.enums import Role


class UserCreateSchema(UserBase):
    """Схема для регистрации пользователя."""

    role: Role
    group_number: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fullName": "Иванов Иван Иванович",
                "email": "ivanov@example.com",
                "role": "student",
                "institution": "Колледж связи",
                "groupNumber": "101",
            }
        }
    )
