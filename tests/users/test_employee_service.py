from __future__ import annotations

from dataclasses import replace

import pytest

from src.hr_attendance.hr_attendance.core.enums import Role
from src.hr_attendance.hr_attendance.core.exceptions import AuthorizationError, ValidationError
from src.hr_attendance.hr_attendance.users.model import Employee, ProfileUpdate
from src.hr_attendance.hr_attendance.users.service import EmployeeService, tracked_employees


class FakeEmployeesRepo:
    def __init__(self, *employees):
        self.profiles = {e.user_id: e for e in employees}
        self.roles = {e.user_id: e.role for e in employees}

    def list_employees(self):
        return [replace(e, role=self.roles.get(e.user_id, Role.EMPLOYEE)) for e in self.profiles.values()]

    def get_by_id(self, user_id):
        e = self.profiles.get(user_id)
        return replace(e, role=self.roles.get(user_id, Role.EMPLOYEE)) if e else None

    def create_profile(self, *, user_id, full_name, department=None, position=None):
        self.profiles[user_id] = Employee(user_id, full_name, department=department, position=position)

    def update_profile(self, *, user_id, update):
        e = self.profiles.get(user_id)
        if not e:
            return False
        self.profiles[user_id] = replace(
            e,
            full_name=update.full_name if update.full_name is not None else e.full_name,
            department=update.department if update.department is not None else e.department,
            position=update.position if update.position is not None else e.position,
        )
        return True

    def get_role(self, user_id):
        return self.roles.get(user_id)

    def upsert_role(self, *, user_id, role):
        self.roles[user_id] = role


def test_tracked_employees_drop_reviewers_and_service_accounts():
    employees = [
        Employee("u1", "Budi Santoso"),
        Employee("u2", "Sari", role=Role.MANAGER),
        Employee("u3", "Super Admin"),
        Employee("u4", "Office MANAGER account"),
        Employee("u5", ""),
    ]

    assert [e.user_id for e in tracked_employees(employees)] == ["u1", "u5"]


def test_create_employee_assigns_role_separately():
    repo = FakeEmployeesRepo()
    changes = []
    svc = EmployeeService(repo, on_change=changes.append)

    user_id = svc.create_employee(current_role=Role.ADMIN, full_name="  Budi  ", role=Role.MANAGER)

    assert repo.profiles[user_id].full_name == "Budi"
    assert repo.roles[user_id] == Role.MANAGER
    assert changes == ["profiles"]


def test_only_admin_creates_employees():
    svc = EmployeeService(FakeEmployeesRepo())

    with pytest.raises(AuthorizationError):
        svc.create_employee(current_role=Role.MANAGER, full_name="Budi")


def test_profile_update_never_touches_role():
    repo = FakeEmployeesRepo(Employee("u1", "Budi"))
    svc = EmployeeService(repo)

    svc.update_profile(current_role=Role.ADMIN, user_id="u1", update=ProfileUpdate(department="Finance"))

    assert repo.profiles["u1"].department == "Finance"
    assert repo.roles["u1"] == Role.EMPLOYEE


def test_assign_role_keeps_one_role_per_employee():
    repo = FakeEmployeesRepo(Employee("u1", "Budi"), Employee("a1", "Root", role=Role.ADMIN))
    changes = []
    svc = EmployeeService(repo, on_change=changes.append)

    svc.assign_role(current_role=Role.ADMIN, current_user_id="a1", user_id="u1", role=Role.MANAGER)
    svc.assign_role(current_role=Role.ADMIN, current_user_id="a1", user_id="u1", role=Role.EMPLOYEE)

    assert repo.roles["u1"] == Role.EMPLOYEE
    assert changes == ["user_roles", "user_roles"]


def test_admin_cannot_demote_self():
    repo = FakeEmployeesRepo(Employee("a1", "Root", role=Role.ADMIN))
    svc = EmployeeService(repo)

    with pytest.raises(ValidationError):
        svc.assign_role(current_role=Role.ADMIN, current_user_id="a1", user_id="a1", role=Role.EMPLOYEE)


def test_manager_cannot_assign_roles():
    repo = FakeEmployeesRepo(Employee("u1", "Budi"))
    svc = EmployeeService(repo)

    with pytest.raises(AuthorizationError):
        svc.assign_role(current_role=Role.MANAGER, current_user_id="m1", user_id="u1", role=Role.ADMIN)


def test_get_missing_employee():
    with pytest.raises(ValidationError):
        EmployeeService(FakeEmployeesRepo()).get("nobody")
