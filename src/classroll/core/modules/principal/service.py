from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from classroll.config import Config
from classroll.core.core import Service
from classroll.core.modules.principal.models import Principal, PrincipalRole, Student, Teacher
from classroll.core.modules.principal.passwords import hash_password
from classroll.errors import NotFoundError

logger = structlog.get_logger(__name__)


class PrincipalService(Service):
    """Read access to the teacher and student identity tables."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self._teachers = database.get_collection("teachers")
        self._students = database.get_collection("students")

    async def on_start(self) -> None:
        """Create indexes and seed the administrator account."""
        await self._teachers.create_index([("email", 1)], unique=True)
        await self._students.create_index([("email", 1)], unique=True)
        await self.ensure_admin_exists()

    async def find_teacher_by_email(self, email: str) -> Teacher | None:
        doc = await self._teachers.find_one({"email": email})
        return Teacher.model_validate(doc) if doc is not None else None

    async def find_student_by_email(self, email: str) -> Student | None:
        doc = await self._students.find_one({"email": email})
        return Student.model_validate(doc) if doc is not None else None

    async def find_by_email(self, email: str) -> Principal | None:
        """Resolve an email to a principal, teachers take precedence over students.

        The two tables are not cross-checked for uniqueness, so a student
        sharing a teacher's email can never be resolved here.
        """
        teacher = await self.find_teacher_by_email(email)
        if teacher is not None:
            if await self._students.find_one({"email": email}, projection={"_id": 1}) is not None:
                logger.warning("principal_email_shadowed", teacher_id=teacher.id)
            return teacher
        return await self.find_student_by_email(email)

    async def get_principal(self, role: PrincipalRole, principal_id: int) -> Principal:
        """Get principal by role and ID."""
        if role == PrincipalRole.TEACHER:
            doc = await self._teachers.find_one({"_id": principal_id})
            if doc is not None:
                return Teacher.model_validate(doc)
        else:
            doc = await self._students.find_one({"_id": principal_id})
            if doc is not None:
                return Student.model_validate(doc)
        raise NotFoundError("User not found")

    async def ensure_admin_exists(self) -> None:
        """Create the configured administrator teacher if not exists."""
        email, password = self.config.admin_email, self.config.admin_password
        if not email or not password:
            return
        if await self.find_teacher_by_email(email) is not None:
            logger.debug("admin_already_exists", email=email)
            return

        admin = Teacher(
            id=await self._next_teacher_id(),
            name=self.config.admin_name,
            email=email,
            contact_number=self.config.admin_contact_number,
            password_hash=hash_password(password, self.config.password_hash_rounds),
            is_admin=True,
        )
        try:
            await self._teachers.insert_one(admin.to_mongo())
        except DuplicateKeyError:
            # Another process seeding at the same time got there first
            if await self.find_teacher_by_email(email) is None:
                raise
            logger.debug("admin_already_exists", email=email)
            return
        logger.info("admin_created", teacher_id=admin.id, email=email)

    async def _next_teacher_id(self) -> int:
        """Next numeric teacher ID after the highest one in use."""
        last = await self._teachers.find_one({}, projection={"_id": 1}, sort=[("_id", -1)])
        return int(last["_id"]) + 1 if last is not None else 1
