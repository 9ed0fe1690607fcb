import pytest

from src.hr_dashboard.hr_dashboard.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from src.hr_dashboard.hr_dashboard.payroll.guard import ScopeGuard
from src.hr_dashboard.hr_dashboard.payroll.model import NewSalaryRecord


@pytest.fixture
def guard(employees_repo, salary_repo):
    return ScopeGuard(employees_repo, salary_repo)


def test_require_account_rejects_missing_account(guard):
    with pytest.raises(UnauthorizedError):
        guard.require_account(None)
    assert guard.require_account(3) == 3


def test_foreign_and_missing_employee_look_the_same(guard, employees_repo):
    foreign = employees_repo.add(2, "EMP900", "Other Owner", 50000)

    with pytest.raises(NotFoundError) as missing:
        guard.assert_owns_employee(1, 999)
    with pytest.raises(NotFoundError) as not_owned:
        guard.assert_owns_employee(1, foreign.employee_id)

    assert str(missing.value) == str(not_owned.value)


def test_owned_employee_is_returned(guard, employees_repo):
    mine = employees_repo.add(1, "EMP001", "John Smith", 75000)

    assert guard.assert_owns_employee(1, mine.employee_id) == mine


def test_record_of_foreign_employee_is_not_found(guard, employees_repo, salary_repo):
    foreign = employees_repo.add(2, "EMP900", "Other Owner", 50000)
    record = salary_repo.insert_if_absent(
        NewSalaryRecord(employee_id=foreign.employee_id, month=1, year=2024, basic_salary=50000, total_salary=50000)
    )

    with pytest.raises(NotFoundError):
        guard.assert_owns_record(1, record.record_id)
    assert guard.assert_owns_record(2, record.record_id) == record


def test_existing_period_is_a_conflict(guard, employees_repo, salary_repo):
    mine = employees_repo.add(1, "EMP001", "John Smith", 75000)
    salary_repo.insert_if_absent(
        NewSalaryRecord(employee_id=mine.employee_id, month=6, year=2024, basic_salary=75000, total_salary=75000)
    )

    with pytest.raises(ConflictError):
        guard.assert_no_existing_record(mine.employee_id, 6, 2024)
    guard.assert_no_existing_record(mine.employee_id, 7, 2024)
