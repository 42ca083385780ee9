"""Transition table tests - every (from, to) pair of both lifecycles"""

import itertools

import pytest

from talentflow.domain.enums import ApplicationStatus, EntityKind, JobPostStatus
from talentflow.engine.transition_rules import (
    APPLICATION_TRANSITIONS, JOB_POST_TRANSITIONS, TransitionRuleTable, get_rule_table
)

JOB_POST_EDGES = {
    (JobPostStatus.DRAFT, JobPostStatus.OPEN): "Publish job post",
    (JobPostStatus.DRAFT, JobPostStatus.ARCHIVED): "Cancel draft without publishing",
    (JobPostStatus.OPEN, JobPostStatus.CLOSED): "Close/fill position",
    (JobPostStatus.OPEN, JobPostStatus.DRAFT): "Unpublish for major edits",
    (JobPostStatus.OPEN, JobPostStatus.ARCHIVED): "Cancel active posting",
    (JobPostStatus.CLOSED, JobPostStatus.ARCHIVED): "Archive completed posting",
    (JobPostStatus.CLOSED, JobPostStatus.OPEN): "Reopen position",
}

APPLICATION_EDGES = {
    (ApplicationStatus.APPLIED, ApplicationStatus.UNDER_REVIEW): "Application moved to under review",
    (ApplicationStatus.APPLIED, ApplicationStatus.REJECTED): "Application rejected",
    (ApplicationStatus.APPLIED, ApplicationStatus.WITHDRAWN): "Application withdrawn by candidate",
    (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.INTERVIEW_SCHEDULED): "Interview scheduled",
    (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.REJECTED): "Application rejected after review",
    (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.WITHDRAWN): "Application withdrawn by candidate",
    (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.OFFER_EXTENDED): "Offer extended",
    (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.REJECTED): "Application rejected after interview",
    (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.WITHDRAWN): "Application withdrawn by candidate",
    (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.HIRED): "Candidate hired",
    (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.REJECTED): "Offer declined or withdrawn",
    (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.WITHDRAWN): "Application withdrawn by candidate",
}


@pytest.mark.parametrize("from_status,to_status", list(itertools.product(JobPostStatus, JobPostStatus)))
def test_job_post_table_matches_expected_edges(from_status, to_status):
    expected = (from_status, to_status) in JOB_POST_EDGES
    assert JOB_POST_TRANSITIONS.is_valid(from_status, to_status) is expected
    assert JOB_POST_TRANSITIONS.describe(from_status, to_status) == JOB_POST_EDGES.get((from_status, to_status))


@pytest.mark.parametrize(
    "from_status,to_status", list(itertools.product(ApplicationStatus, ApplicationStatus))
)
def test_application_table_matches_expected_edges(from_status, to_status):
    expected = (from_status, to_status) in APPLICATION_EDGES
    assert APPLICATION_TRANSITIONS.is_valid(from_status, to_status) is expected
    assert APPLICATION_TRANSITIONS.describe(from_status, to_status) == APPLICATION_EDGES.get(
        (from_status, to_status)
    )


def test_edge_counts():
    assert len(JOB_POST_TRANSITIONS.edges) == 7
    assert len(APPLICATION_TRANSITIONS.edges) == 12


@pytest.mark.parametrize("table", [JOB_POST_TRANSITIONS, APPLICATION_TRANSITIONS])
def test_no_self_loops(table):
    for status in table.statuses:
        assert not table.is_valid(status, status)


def test_terminal_statuses():
    assert [s for s in JobPostStatus if JOB_POST_TRANSITIONS.is_terminal(s)] == [JobPostStatus.ARCHIVED]
    assert [s for s in ApplicationStatus if APPLICATION_TRANSITIONS.is_terminal(s)] == [
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ]


def test_edges_from_returns_only_outgoing_edges():
    edges = JOB_POST_TRANSITIONS.edges_from(JobPostStatus.OPEN)
    assert {(e.from_status, e.to_status) for e in edges} == {
        (JobPostStatus.OPEN, JobPostStatus.CLOSED),
        (JobPostStatus.OPEN, JobPostStatus.DRAFT),
        (JobPostStatus.OPEN, JobPostStatus.ARCHIVED),
    }
    assert JOB_POST_TRANSITIONS.edges_from(JobPostStatus.ARCHIVED) == frozenset()


def test_targets_from_follows_enum_order():
    assert JOB_POST_TRANSITIONS.targets_from(JobPostStatus.OPEN) == [
        JobPostStatus.DRAFT, JobPostStatus.CLOSED, JobPostStatus.ARCHIVED
    ]


def test_edges_are_immutable():
    edge = next(iter(JOB_POST_TRANSITIONS.edges))
    with pytest.raises(Exception):
        edge.description = "changed"


def test_self_loop_is_rejected_at_construction():
    with pytest.raises(ValueError):
        TransitionRuleTable(
            kind=EntityKind.JOB_POST,
            status_type=JobPostStatus,
            initial_status=JobPostStatus.DRAFT,
            edges=[(JobPostStatus.DRAFT, JobPostStatus.DRAFT, "loop")]
        )


def test_get_rule_table_by_kind():
    assert get_rule_table(EntityKind.JOB_POST) is JOB_POST_TRANSITIONS
    assert get_rule_table(EntityKind.APPLICATION) is APPLICATION_TRANSITIONS
    assert JOB_POST_TRANSITIONS.initial_status == JobPostStatus.DRAFT
    assert APPLICATION_TRANSITIONS.initial_status == ApplicationStatus.APPLIED
