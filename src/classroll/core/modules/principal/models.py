"""Principal models: teachers and students who can sign in."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from classroll.core.db import MongoModel


class PrincipalRole(StrEnum):
    """Identity class a principal was resolved from."""

    TEACHER = "teacher"
    STUDENT = "student"


class PrincipalRecord(MongoModel):
    """Fields shared by every identity table.

    Records are owned by the record-management side of the system,
    authentication only reads them.
    """

    role: ClassVar[PrincipalRole]

    id: int = Field(alias="_id", serialization_alias="id")
    name: str
    email: str
    contact_number: str
    password_hash: str  # bcrypt hash

    @field_validator("contact_number", mode="before")
    @classmethod
    def _contact_number_as_text(cls, value: object) -> object:
        # Some records store the number as an integer
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def has_admin_privileges(self) -> bool:
        return False


class Teacher(PrincipalRecord):
    """Staff member. The only kind of principal that may be an administrator."""

    role: ClassVar[PrincipalRole] = PrincipalRole.TEACHER

    is_admin: bool = False

    @property
    def has_admin_privileges(self) -> bool:
        return self.is_admin


class Student(PrincipalRecord):
    """Enrolled member. Never an administrator."""

    role: ClassVar[PrincipalRole] = PrincipalRole.STUDENT


Principal = Teacher | Student


class PrincipalView(BaseModel):
    """Signed-in principal summary (API representation)."""

    id: int = Field(..., description="Principal ID within its role")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    contact_number: str = Field(..., description="Phone or other contact")
    is_admin: bool = Field(..., alias="isAdmin", description="Administrator privileges")
    role: PrincipalRole = Field(..., description="Identity class")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, principal: Principal) -> "PrincipalView":
        """Create view model from domain model."""
        return cls(
            id=principal.id,
            name=principal.name,
            email=principal.email,
            contact_number=principal.contact_number,
            is_admin=principal.has_admin_privileges,
            role=principal.role,
        )
