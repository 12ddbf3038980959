"""Tests for the employee record use cases."""

import asyncio
from dataclasses import replace
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from conftest import FakeUploadSink

from hrgraph.domain import EmployeeInput, EmployeePatch, Gender
from hrgraph.errors import ErrorKind, ServiceError
from hrgraph.services.employees import DELETED_MESSAGE, EMPLOYEE_PHOTO_FOLDER, EmployeeService

PHOTO = "data:image/png;base64,iVBORw0KGgo="
EARLIER = datetime(2025, 3, 1, tzinfo=UTC)


def employee_input(**overrides) -> EmployeeInput:
    values = {
        "first_name": " Ada ",
        "last_name": "Lovelace ",
        "email": " Ada@Company.com ",
        "gender": "Female",
        "designation": " Engineer",
        "salary": 5000,
        "date_of_joining": "2024-01-15",
        "department": "Research",
    }
    values.update(overrides)
    return EmployeeInput(**values)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_normalizes_fields(self, employee_service):
        employee = await employee_service.create(employee_input())

        assert employee.first_name == "Ada"
        assert employee.last_name == "Lovelace"
        assert employee.email == "ada@company.com"
        assert employee.gender is Gender.FEMALE
        assert employee.designation == "Engineer"
        assert employee.salary == Decimal(5000)
        assert employee.date_of_joining == date(2024, 1, 15)
        assert employee.photo_url == ""
        assert employee.created_at == employee.updated_at

    @pytest.mark.asyncio
    async def test_create_then_fetch_round_trip(self, employee_service):
        created = await employee_service.create(employee_input())

        fetched = await employee_service.get_by_id(created.id)

        assert fetched == created

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing",
        ["first_name", "last_name", "email", "designation", "salary", "date_of_joining", "department"],
    )
    async def test_required_fields(self, employee_service, missing):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.create(employee_input(**{missing: None}))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message.endswith("are required.")

    @pytest.mark.asyncio
    async def test_gender_is_optional(self, employee_service):
        employee = await employee_service.create(employee_input(gender=None))

        assert employee.gender is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"email": "ada-at-company"}, "Invalid employee email format."),
            ({"email": "Boss <boss@company.com>"}, "Invalid employee email format."),
            ({"gender": "female"}, "gender must be Male, Female, or Other."),
            ({"salary": "lots"}, "salary must be a number."),
            ({"date_of_joining": "someday"}, "date_of_joining must be a valid date string."),
        ],
    )
    async def test_invalid_fields(self, employee_service, overrides, message):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.create(employee_input(**overrides))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == message

    @pytest.mark.asyncio
    async def test_salary_boundary(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.create(employee_input(salary=999))
        assert excinfo.value.kind is ErrorKind.BAD_REQUEST

        employee = await employee_service.create(employee_input(salary=1000))
        assert employee.salary == Decimal(1000)

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, employee_service):
        await employee_service.create(employee_input())

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.create(employee_input(email="ADA@company.com", first_name="Other"))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == "Employee email already exists."

    @pytest.mark.asyncio
    async def test_storage_conflict_maps_to_bad_request(self, employee_service, employee_repo):
        await employee_service.create(employee_input())

        async def no_match(email, exclude_id=None):
            return None

        employee_repo.find_by_email = no_match

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.create(employee_input())

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == "Employee email already exists."

    @pytest.mark.asyncio
    async def test_photo_uploaded_to_fixed_folder(self, employee_service, upload_sink):
        employee = await employee_service.create(employee_input(photo=PHOTO))

        assert upload_sink.uploads == [(PHOTO, EMPLOYEE_PHOTO_FOLDER)]
        assert employee.photo_url == f"https://images.test/{EMPLOYEE_PHOTO_FOLDER}/photo-1.png"

    @pytest.mark.asyncio
    async def test_photo_without_configured_sink_is_internal(self, employee_repo):
        service = EmployeeService(employee_repo, uploads=None)

        with pytest.raises(ServiceError) as excinfo:
            await service.create(employee_input(photo=PHOTO))

        assert excinfo.value.kind is ErrorKind.INTERNAL
        assert employee_repo.rows == {}

    @pytest.mark.asyncio
    async def test_rejected_upload_is_internal(self, employee_repo):
        service = EmployeeService(employee_repo, uploads=FakeUploadSink(fail_with="Invalid image file"))

        with pytest.raises(ServiceError) as excinfo:
            await service.create(employee_input(photo=PHOTO))

        assert excinfo.value.kind is ErrorKind.INTERNAL
        assert "Invalid image file" in excinfo.value.message
        assert employee_repo.rows == {}

    @pytest.mark.asyncio
    async def test_validation_runs_before_upload(self, employee_service, upload_sink):
        with pytest.raises(ServiceError):
            await employee_service.create(employee_input(salary=10, photo=PHOTO))

        assert upload_sink.uploads == []


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, employee_service, seeded_employees):
        employees = await employee_service.list_all()

        assert [e.first_name for e in employees] == ["Barbara", "Linus", "Grace"]

    @pytest.mark.asyncio
    async def test_get_by_id_requires_id(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.get_by_id("")

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == "Employee id is required."

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.get_by_id("does-not-exist")

        assert excinfo.value.kind is ErrorKind.NOT_FOUND
        assert excinfo.value.message == "Employee not found."


class TestSearch:
    @pytest.mark.asyncio
    async def test_requires_a_term(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.search(designation=" ", department=None)

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == "Provide designation or department to search."

    @pytest.mark.asyncio
    async def test_designation_substring_case_insensitive(self, employee_service, seeded_employees):
        results = await employee_service.search(designation="engineer")

        assert [e.first_name for e in results] == ["Grace"]

    @pytest.mark.asyncio
    async def test_department_only(self, employee_service, seeded_employees):
        results = await employee_service.search(department="SALES")

        assert [e.first_name for e in results] == ["Linus"]

    @pytest.mark.asyncio
    async def test_both_terms_return_union(self, employee_service, seeded_employees):
        results = await employee_service.search(designation="Engineer", department="Sales")

        assert [e.first_name for e in results] == ["Linus", "Grace"]

    @pytest.mark.asyncio
    async def test_terms_are_matched_literally(self, employee_service, seeded_employees):
        assert await employee_service.search(designation=".*") == []


class TestUpdate:
    @pytest.mark.asyncio
    async def test_salary_only_changes_salary_and_updated_at(self, employee_service, employee_factory):
        original = employee_factory(created_at=EARLIER)

        updated = await employee_service.update(original.id, EmployeePatch(salary=5500))

        assert updated.salary == Decimal(5500)
        assert updated.updated_at > original.updated_at
        assert replace(updated, salary=original.salary, updated_at=original.updated_at) == original

    @pytest.mark.asyncio
    async def test_empty_patch_only_touches_updated_at(self, employee_service, employee_factory):
        original = employee_factory(created_at=EARLIER)

        updated = await employee_service.update(original.id, EmployeePatch())

        assert replace(updated, updated_at=original.updated_at) == original

    @pytest.mark.asyncio
    async def test_requires_id(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(None, EmployeePatch(salary=5000))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST

    @pytest.mark.asyncio
    async def test_missing_employee(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update("missing", EmployeePatch(salary=5000))

        assert excinfo.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_email_normalized_and_validated(self, employee_service, employee_factory):
        employee = employee_factory()

        updated = await employee_service.update(employee.id, EmployeePatch(email=" New@Company.com "))
        assert updated.email == "new@company.com"

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(email="broken"))
        assert excinfo.value.message == "Invalid employee email format."

    @pytest.mark.asyncio
    async def test_email_may_stay_the_same(self, employee_service, employee_factory):
        employee = employee_factory(email="same@company.com")

        updated = await employee_service.update(employee.id, EmployeePatch(email="SAME@company.com"))

        assert updated.email == "same@company.com"

    @pytest.mark.asyncio
    async def test_email_taken_by_another_employee(self, employee_service, employee_factory):
        employee_factory(email="taken@company.com")
        employee = employee_factory()

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(email="taken@company.com"))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
        assert excinfo.value.message == "Another employee already uses this email."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["", None])
    async def test_empty_gender_clears_it(self, employee_service, employee_factory, value):
        employee = employee_factory(gender=Gender.MALE)

        updated = await employee_service.update(employee.id, EmployeePatch(gender=value))

        assert updated.gender is None

    @pytest.mark.asyncio
    async def test_invalid_gender_rejected(self, employee_service, employee_factory):
        employee = employee_factory()

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(gender="robot"))

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST

    @pytest.mark.asyncio
    async def test_salary_and_date_validated(self, employee_service, employee_factory):
        employee = employee_factory()

        with pytest.raises(ServiceError):
            await employee_service.update(employee.id, EmployeePatch(salary=999))
        with pytest.raises(ServiceError):
            await employee_service.update(employee.id, EmployeePatch(date_of_joining="not a date"))

        updated = await employee_service.update(
            employee.id, EmployeePatch(salary="1000", date_of_joining="2020-06-30")
        )
        assert updated.salary == Decimal(1000)
        assert updated.date_of_joining == date(2020, 6, 30)

    @pytest.mark.asyncio
    async def test_text_fields_trimmed_and_not_blank(self, employee_service, employee_factory):
        employee = employee_factory()

        updated = await employee_service.update(
            employee.id, EmployeePatch(designation=" Staff Engineer ", department="Platform ")
        )
        assert updated.designation == "Staff Engineer"
        assert updated.department == "Platform"

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(first_name="  "))
        assert excinfo.value.message == "first_name cannot be empty."

    @pytest.mark.asyncio
    async def test_new_photo_overwrites_url(self, employee_service, employee_factory, upload_sink):
        employee = employee_factory(photo_url="https://images.test/old.png")

        updated = await employee_service.update(employee.id, EmployeePatch(photo=PHOTO))

        assert upload_sink.uploads == [(PHOTO, EMPLOYEE_PHOTO_FOLDER)]
        assert updated.photo_url != "https://images.test/old.png"

    @pytest.mark.asyncio
    async def test_empty_photo_keeps_existing_url(self, employee_service, employee_factory, upload_sink):
        employee = employee_factory(photo_url="https://images.test/old.png")

        updated = await employee_service.update(employee.id, EmployeePatch(photo=""))

        assert updated.photo_url == "https://images.test/old.png"
        assert upload_sink.uploads == []

    @pytest.mark.asyncio
    async def test_failed_validation_leaves_record_untouched(
        self, employee_service, employee_factory, employee_repo
    ):
        employee = employee_factory()

        with pytest.raises(ServiceError):
            await employee_service.update(employee.id, EmployeePatch(salary=7000, gender="robot"))

        assert employee_repo.rows[employee.id] == employee

    @pytest.mark.asyncio
    async def test_concurrent_updates_to_different_fields_both_persist(
        self, employee_service, employee_factory, employee_repo
    ):
        employee = employee_factory(salary=Decimal(5000), department="Research")
        find_by_id = employee_repo.find_by_id

        async def interleaving_find_by_id(employee_id):
            found = await find_by_id(employee_id)
            # Let the other update read the same snapshot before either writes
            await asyncio.sleep(0)
            return found

        employee_repo.find_by_id = interleaving_find_by_id

        await asyncio.gather(
            employee_service.update(employee.id, EmployeePatch(salary=9000)),
            employee_service.update(employee.id, EmployeePatch(department="Sales")),
        )

        stored = employee_repo.rows[employee.id]
        assert stored.salary == Decimal(9000)
        assert stored.department == "Sales"

    @pytest.mark.asyncio
    async def test_salary_precision_and_upper_bound(self, employee_service, employee_factory):
        employee = employee_factory()

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(salary="1000.125"))
        assert excinfo.value.message == "salary must have at most 2 decimal places."

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.update(employee.id, EmployeePatch(salary=10**10))
        assert excinfo.value.kind is ErrorKind.BAD_REQUEST


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_returns_acknowledgement(self, employee_service, employee_factory, employee_repo):
        employee = employee_factory()

        assert await employee_service.delete(employee.id) == DELETED_MESSAGE
        assert employee.id not in employee_repo.rows

    @pytest.mark.asyncio
    async def test_delete_twice_fails_second_time(self, employee_service, employee_factory):
        employee = employee_factory()
        await employee_service.delete(employee.id)

        with pytest.raises(ServiceError) as excinfo:
            await employee_service.delete(employee.id)

        assert excinfo.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, employee_service):
        with pytest.raises(ServiceError) as excinfo:
            await employee_service.delete("")

        assert excinfo.value.kind is ErrorKind.BAD_REQUEST
