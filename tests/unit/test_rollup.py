"""Tests for parent project rollups."""

from decimal import Decimal

import pytest

from src.apex.models import ProjectStatus
from src.apex.services.rollup import (
    RollupService,
    canonical_status,
    compute_rollup,
    round_half_up,
    to_decimal,
    worst_status,
)
from tests.factories import ProjectFactory

pytestmark = pytest.mark.unit


class TestToDecimal:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            ("abc", Decimal("0")),
            (True, Decimal("0")),
            (float("nan"), Decimal("0")),
            (float("inf"), Decimal("0")),
            ("12.5", Decimal("12.5")),
            (3, Decimal("3")),
            (Decimal("7.25"), Decimal("7.25")),
        ],
    )
    def test_coercion(self, value, expected):
        assert to_decimal(value) == expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("0.5", 1), ("1.5", 2), ("2.5", 3), ("2.49", 2), ("21", 21)],
    )
    def test_half_rounds_up(self, value, expected):
        assert round_half_up(Decimal(value)) == expected


class TestStatusRanking:
    def test_active_ranks_as_in_progress(self):
        assert canonical_status("active") == "in-progress"
        assert canonical_status(ProjectStatus.ACTIVE) == "in-progress"

    @pytest.mark.parametrize("status", ["scheduled", "bogus", "", None])
    def test_unknown_status_ranks_as_planning(self, status):
        assert canonical_status(status) == "planning"

    def test_worst_status_picks_lowest_rank(self):
        assert worst_status(["completed", "on-hold", "in-progress"]) == "on-hold"
        assert worst_status(["completed", "cancelled", "on-hold"]) == "cancelled"

    def test_unknown_status_ties_with_planning(self):
        assert worst_status(["completed", "mystery", "in-progress"]) == "planning"

    def test_empty_has_no_worst_status(self):
        assert worst_status([]) is None


class TestComputeRollup:
    def test_no_children_is_a_no_op(self):
        assert compute_rollup([]) is None

    def test_missing_figures_count_as_zero(self):
        children = [
            ProjectFactory.build(estimated_budget=Decimal("100")),
            ProjectFactory.build(estimated_budget=Decimal("200")),
            ProjectFactory.build(estimated_budget=None),
        ]

        rollup = compute_rollup(children)

        assert rollup.estimated_budget == Decimal("300")

    def test_progress_is_rounded_mean(self):
        children = [ProjectFactory.build(progress=p) for p in (10, 20, 33)]

        assert compute_rollup(children).progress == 21

    def test_progress_half_rounds_up(self):
        children = [ProjectFactory.build(progress=p) for p in (50, 51)]

        assert compute_rollup(children).progress == 51

    def test_status_is_worst_child_status(self):
        children = [
            ProjectFactory.build(status=s) for s in ("completed", "on-hold", "in-progress")
        ]

        assert compute_rollup(children).status == "on-hold"

    def test_sums_budgets_and_hours(self):
        children = [
            ProjectFactory.build(
                estimated_budget=Decimal("50000"),
                actual_budget=Decimal("40000"),
                actual_hours=Decimal("12.5"),
            ),
            ProjectFactory.build(
                estimated_budget=Decimal("30000"),
                actual_budget=Decimal("35000"),
                actual_hours=Decimal("7.5"),
            ),
        ]

        rollup = compute_rollup(children)

        assert rollup.estimated_budget == Decimal("80000")
        assert rollup.actual_budget == Decimal("75000")
        assert rollup.actual_hours == Decimal("20.0")
        assert rollup.child_count == 2

    def test_as_values_has_the_five_rollup_columns(self):
        rollup = compute_rollup([ProjectFactory.build(progress=40, status="active")])

        assert rollup.as_values() == {
            "estimated_budget": Decimal("0"),
            "actual_budget": Decimal("0"),
            "actual_hours": Decimal("0"),
            "progress": 40,
            "status": "in-progress",
        }


class TestRollupService:
    @pytest.fixture
    def wtb_001(self, project_repo):
        """Parent with two locations, as in the portfolio import."""
        parent = ProjectFactory.build(
            id="WTB_001",
            status="planning",
            estimated_budget=Decimal("1"),
            actual_budget=Decimal("1"),
            progress=0,
        )
        loc1 = ProjectFactory.child_of(
            "WTB_001",
            id="WTB_001_loc1",
            estimated_budget=Decimal("50000"),
            actual_budget=Decimal("40000"),
            progress=50,
            status="active",
        )
        loc2 = ProjectFactory.child_of(
            "WTB_001",
            id="WTB_001_loc2",
            estimated_budget=Decimal("30000"),
            actual_budget=Decimal("35000"),
            progress=80,
            status="completed",
        )
        project_repo.seed(parent, loc1, loc2)
        return parent

    async def test_recompute_parent_overwrites_parent_figures(self, project_repo, wtb_001):
        rollup = await RollupService(project_repo).recompute_parent("WTB_001")

        row = project_repo.row("WTB_001")
        assert rollup is not None
        assert row["estimated_budget"] == Decimal("80000")
        assert row["actual_budget"] == Decimal("75000")
        assert row["progress"] == 65
        assert row["status"] == "in-progress"

    async def test_recompute_is_idempotent(self, project_repo, wtb_001):
        service = RollupService(project_repo)

        first = await service.recompute_parent("WTB_001")
        second = await service.recompute_parent("WTB_001")

        assert first == second
        assert project_repo.row("WTB_001")["progress"] == 65

    async def test_parent_without_children_keeps_its_values(self, project_repo):
        parent = ProjectFactory.build(id="WTB_LONE", progress=42, status="on-hold")
        project_repo.seed(parent)

        assert await RollupService(project_repo).recompute_parent("WTB_LONE") is None

        row = project_repo.row("WTB_LONE")
        assert row["progress"] == 42
        assert row["status"] == "on-hold"
        assert row["version"] == 1
