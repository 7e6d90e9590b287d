"""
Tests for the project verification scoring heuristic.
"""

import pytest

from samudra.core.errors import NotFoundError, ValidationError
from samudra.handlers.scoring import (
    RECOMMEND_APPROVE,
    RECOMMEND_CONDITIONAL_MINOR,
    RECOMMEND_CONDITIONAL_RISKY,
    RECOMMEND_REJECT,
    RECOMMEND_REVIEW,
    RISK_NON_COASTAL,
    RISK_SMALL_AREA,
    RISK_VERY_SMALL_AREA,
    calculate_verification_score,
    generate_recommendation,
    get_verification,
    round_half_up,
    score_area,
    score_location,
    verify_project,
)
from samudra.models.project import ProjectCreate

STRONG_DESCRIPTION = (
    "Community-led mangrove restoration and conservation with satellite monitoring, "
    "biodiversity baseline surveys and stakeholder MRV for carbon sequestration."
)


def strong_project(**overrides):
    data = dict(
        name="Sundarbans Mangrove Restoration",
        description=STRONG_DESCRIPTION,
        location="Sundarbans, West Bengal",
        ecosystem_type="mangrove",
        area=1500
    )
    data.update(overrides)
    return ProjectCreate(**data)


def test_strong_mangrove_project_is_approved():
    result = calculate_verification_score(strong_project())

    assert result.score >= 0.8
    assert result.recommendation == RECOMMEND_APPROVE
    assert result.risk_factors == []
    assert result.confidence == 0.8


def test_weak_project_is_rejected():
    result = calculate_verification_score(ProjectCreate(
        name="X",
        description="",
        location="Delhi",
        area=30
    ))

    assert result.score < 0.4
    assert result.recommendation == RECOMMEND_REJECT
    assert len(result.risk_factors) >= 3
    assert RISK_NON_COASTAL in result.risk_factors


@pytest.mark.parametrize("project", [
    ProjectCreate(),
    strong_project(),
    strong_project(area=1),
    strong_project(location="Nowhere", description=None, name=None),
    ProjectCreate(ecosystem_type="kelp", area=0.5, location=""),
])
def test_score_and_confidence_are_bounded(project):
    result = calculate_verification_score(project)

    assert 0 <= result.score <= 1
    assert 0.3 <= result.confidence <= 1
    assert result.score == round(result.score, 2)


def test_ecosystem_ranking():
    scores = [
        calculate_verification_score(ProjectCreate(ecosystem_type=eco, area=500, location="Goa")).score
        for eco in ("mangrove", "seagrass", "saltmarsh", "coastal_wetland")
    ]

    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == 4


def test_scoring_is_deterministic():
    project = strong_project(area=75, location="Kerala")

    assert calculate_verification_score(project) == calculate_verification_score(project)


def test_small_area_penalties_stack():
    risks_75, risks_30 = [], []

    assert score_area(75, risks_75) == pytest.approx(-0.05)
    assert score_area(30, risks_30) == pytest.approx(-0.15)
    assert risks_75 == [RISK_SMALL_AREA]
    assert risks_30 == [RISK_SMALL_AREA, RISK_VERY_SMALL_AREA]


def test_area_bonus_and_missing_area():
    risks = []

    assert score_area(1001, risks) == 0.1
    assert score_area(500, risks) == 0
    assert score_area(None, risks) == 0
    assert risks == []


def test_location_scoring():
    risks = []

    assert score_location("Chilika Lake, Odisha", risks) == 0.15
    assert score_location("Panaji, Goa", risks) == 0.1
    assert risks == []
    assert score_location("Jaipur, Rajasthan", risks) == -0.15
    assert risks == [RISK_NON_COASTAL]


@pytest.mark.parametrize("score,risks,expected", [
    (0.85, [], RECOMMEND_APPROVE),
    (0.7, ["a", "b"], RECOMMEND_CONDITIONAL_MINOR),
    (0.7, ["a", "b", "c"], RECOMMEND_CONDITIONAL_RISKY),
    (0.5, [], RECOMMEND_REVIEW),
    (0.39, [], RECOMMEND_REJECT),
])
def test_generate_recommendation(score, risks, expected):
    assert generate_recommendation(score, risks) == expected


def test_round_half_up():
    assert round_half_up(0.125) == 0.13
    assert round_half_up(0.5) == 0.5
    assert round_half_up(0.734) == 0.73


async def test_verify_project_stores_latest_result(session):
    await verify_project(session, "project_1", strong_project(area=30), "user_verifier")
    second = await verify_project(session, "project_1", strong_project(), "user_verifier")

    stored = await get_verification(session, "project_1")
    assert stored.ml_score == second.ml_score
    assert stored.recommendation == RECOMMEND_APPROVE
    assert stored.verifier_id == "user_verifier"


async def test_verify_project_requires_id(session):
    with pytest.raises(ValidationError, match="Project ID is required"):
        await verify_project(session, None, strong_project(), "user_verifier")


async def test_get_verification_missing(session):
    with pytest.raises(NotFoundError, match="No ML verification found for this project"):
        await get_verification(session, "project_unknown")
