"""Tests for principal models."""

from classroll.core.modules.principal.models import PrincipalRole, PrincipalView, Student, Teacher


class TestPrincipalRecords:
    def test_teacher_from_document(self):
        teacher = Teacher.model_validate(
            {"_id": 3, "name": "Ann", "email": "ann@s.com", "contact_number": 5550123, "password_hash": "x", "is_admin": True}
        )
        assert teacher.id == 3
        assert teacher.contact_number == "5550123"
        assert teacher.role == PrincipalRole.TEACHER
        assert teacher.has_admin_privileges is True

    def test_teacher_admin_flag_defaults_false(self):
        teacher = Teacher(id=4, name="Bo", email="bo@s.com", contact_number="1", password_hash="x")
        assert teacher.has_admin_privileges is False

    def test_student_never_admin(self):
        """Test that a stray is_admin field on a student document grants nothing."""
        student = Student.model_validate(
            {"_id": 5, "name": "Cy", "email": "cy@s.com", "contact_number": "2", "password_hash": "x", "is_admin": True}
        )
        assert student.role == PrincipalRole.STUDENT
        assert student.has_admin_privileges is False

    def test_to_mongo_uses_underscore_id(self):
        teacher = Teacher(id=4, name="Bo", email="bo@s.com", contact_number="1", password_hash="x")
        doc = teacher.to_mongo()
        assert doc["_id"] == 4
        assert "id" not in doc
        assert "role" not in doc


class TestPrincipalView:
    def test_from_teacher(self):
        teacher = Teacher(id=7, name="Ann", email="t@s.com", contact_number="99", password_hash="x", is_admin=True)
        view = PrincipalView.from_domain(teacher)
        assert view.model_dump(by_alias=True) == {
            "id": 7,
            "name": "Ann",
            "email": "t@s.com",
            "contact_number": "99",
            "isAdmin": True,
            "role": PrincipalRole.TEACHER,
        }

    def test_from_student(self):
        student = Student(id=12, name="Cy", email="s@s.com", contact_number="5", password_hash="x")
        view = PrincipalView.from_domain(student)
        assert view.is_admin is False
        assert view.role == "student"

    def test_password_hash_not_exposed(self):
        student = Student(id=12, name="Cy", email="s@s.com", contact_number="5", password_hash="secret-hash")
        assert "secret-hash" not in PrincipalView.from_domain(student).model_dump_json()
