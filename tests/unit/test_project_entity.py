"""Unit tests for the Project entity and its status state machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from akcity.domain.errors import InvalidTransitionError, ValidationError
from akcity.domain.models import BuildingInfo, ClientInfo, ConstructionType, Project, ProjectStatus
from akcity.domain.models.project import PROJECT_TRANSITIONS

START = datetime(2026, 1, 1, tzinfo=timezone.utc)
END = datetime(2026, 12, 31, tzinfo=timezone.utc)


def make_building(**overrides) -> BuildingInfo:
    fields = {
        "total_blocks": 2,
        "total_apartments": 80,
        "apartments_per_block": 40,
        "floors_per_block": 10,
        "total_area": 6400.5,
        "construction_type": ConstructionType.RESIDENTIAL,
    }
    fields.update(overrides)
    return BuildingInfo(**fields)


def make_project(**overrides) -> Project:
    fields = {
        "name": " Riverside Towers ",
        "description": "Two residential blocks",
        "location": "Lisbon",
        "start_date": START,
        "end_date": END,
        "project_manager": "pm-1",
        "building_info": make_building(),
        "client": ClientInfo(name="ACME", contact="Ann", phone="+1 555 0199", email="ann@acme.io"),
    }
    fields.update(overrides)
    return Project.create(**fields)


def in_progress_project() -> Project:
    project = make_project()
    project.start()
    return project


class TestProjectCreation:
    """Tests for invariants checked on construction."""

    def test_defaults(self) -> None:
        project = make_project()
        assert project.name == "Riverside Towers"
        assert project.status is ProjectStatus.PLANNING
        assert project.progress == 0
        assert project.documents == []

    def test_end_date_must_follow_start_date(self) -> None:
        with pytest.raises(ValidationError, match="End date must be after start date"):
            make_project(end_date=START)

    def test_name_is_required(self) -> None:
        with pytest.raises(ValidationError):
            make_project(name="   ")

    def test_negative_building_figures_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_building(total_blocks=-1)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_area_rejected(self, value: float) -> None:
        with pytest.raises(ValidationError):
            make_building(total_area=value)

    def test_unknown_construction_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_building(construction_type="castle")

    def test_team_is_deduplicated(self) -> None:
        assert make_project(team=["u1", "u2", "u1"]).team == ["u1", "u2"]

    def test_naive_dates_are_treated_as_utc(self) -> None:
        project = make_project(start_date=datetime(2026, 1, 1), end_date=datetime(2026, 6, 1))
        assert project.start_date.tzinfo is not None

    def test_persistence_round_trip_keeps_nested_values(self) -> None:
        project = in_progress_project()
        project.id = "p1"
        project.add_document(name="plan.pdf", url="https://files/plan.pdf", type="pdf", size=1024)
        restored = Project.from_persistence(project.to_persistence())
        assert restored.status is ProjectStatus.IN_PROGRESS
        assert restored.building_info == project.building_info
        assert restored.documents[0].name == "plan.pdf"


class TestProjectProgress:
    """Tests for progress bounds."""

    @pytest.mark.parametrize("value", [0, 42.5, 100])
    def test_valid_progress(self, value: float) -> None:
        project = make_project()
        project.update_progress(value)
        assert project.progress == value

    @pytest.mark.parametrize("value", [-1, 100.01, True, "50", float("nan"), float("inf")])
    def test_invalid_progress(self, value) -> None:
        project = make_project()
        with pytest.raises(ValidationError):
            project.update_progress(value)
        assert project.progress == 0


class TestProjectTransitions:
    """Tests for the status state machine."""

    def test_every_status_has_an_entry(self) -> None:
        assert set(PROJECT_TRANSITIONS) == set(ProjectStatus)

    @pytest.mark.parametrize("target", [ProjectStatus.IN_PROGRESS, ProjectStatus.SUSPENDED, ProjectStatus.CANCELLED])
    def test_planning_moves(self, target: ProjectStatus) -> None:
        project = make_project()
        project.update_status(target)
        assert project.status is target

    def test_planning_cannot_complete(self) -> None:
        project = make_project()
        with pytest.raises(InvalidTransitionError):
            project.update_status(ProjectStatus.COMPLETED)
        assert project.status is ProjectStatus.PLANNING

    @pytest.mark.parametrize("terminal", [ProjectStatus.SUSPENDED, ProjectStatus.CANCELLED])
    def test_terminal_statuses(self, terminal: ProjectStatus) -> None:
        project = make_project()
        project.update_status(terminal)
        with pytest.raises(InvalidTransitionError, match=f"Cannot transition from {terminal.value}"):
            project.update_status(ProjectStatus.IN_PROGRESS)

    def test_complete_requires_full_progress(self) -> None:
        project = in_progress_project()
        project.update_progress(99)
        assert project.can_be_completed() is False
        with pytest.raises(InvalidTransitionError):
            project.complete()

    def test_complete(self) -> None:
        project = in_progress_project()
        project.update_progress(100)
        project.complete()
        assert project.status is ProjectStatus.COMPLETED
        with pytest.raises(InvalidTransitionError):
            project.update_status(ProjectStatus.CANCELLED)

    def test_update_status_completed_uses_completion_guard(self) -> None:
        project = in_progress_project()
        with pytest.raises(InvalidTransitionError, match="100% progress"):
            project.update_status(ProjectStatus.COMPLETED)
        project.update_progress(100)
        project.update_status(ProjectStatus.COMPLETED)
        assert project.status is ProjectStatus.COMPLETED


class TestProjectCollections:
    """Tests for team, documents and nested value updates."""

    def test_team_membership(self) -> None:
        project = make_project()
        assert project.add_team_member("u1") is True
        assert project.add_team_member("u1") is False
        assert project.remove_team_member("u1") is True
        assert project.remove_team_member("u1") is False

    def test_documents(self) -> None:
        project = make_project()
        document = project.add_document(name="plan.pdf", url="https://files/plan.pdf", type="pdf", size=10)
        assert document.uploaded_at.tzinfo is not None
        assert project.remove_document("plan.pdf") is True
        assert project.remove_document("plan.pdf") is False

    def test_update_building_info_validates(self) -> None:
        project = make_project()
        project.update_building_info(total_blocks=3)
        assert project.building_info.total_blocks == 3
        with pytest.raises(ValidationError):
            project.update_building_info(total_area=-5)

    def test_update_basic_info_checks_dates(self) -> None:
        project = make_project()
        with pytest.raises(ValidationError):
            project.update_basic_info(end_date=START - timedelta(days=1))
        project.update_basic_info(name="Riverside II", location="Porto")
        assert (project.name, project.location) == ("Riverside II", "Porto")


class TestProjectSchedule:
    """Tests for overdue and remaining-days queries."""

    def test_overdue_only_when_in_progress(self) -> None:
        after_end = END + timedelta(days=1)
        project = make_project()
        assert project.is_overdue(after_end) is False
        project.start()
        assert project.is_overdue(after_end) is True
        assert project.is_overdue(END - timedelta(days=1)) is False

    def test_days_remaining_rounds_up(self) -> None:
        project = make_project()
        assert project.days_remaining(END - timedelta(hours=36)) == 2
        assert project.days_remaining(END + timedelta(days=3)) == -3
