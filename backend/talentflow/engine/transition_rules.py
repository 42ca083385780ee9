"""Transition Rules - Static lifecycle tables per entity kind"""
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Type

from ..domain.models import TransitionEdge, LifecycleStatus
from ..domain.enums import EntityKind, JobPostStatus, ApplicationStatus


class TransitionRuleTable:
    """
    Adjacency table of allowed (from -> to) status pairs for one entity kind

    Pure and stateless. A status with no outgoing edges is terminal.
    """

    def __init__(
        self,
        kind: EntityKind,
        status_type: Type[LifecycleStatus],
        initial_status: LifecycleStatus,
        edges: Iterable[Tuple[LifecycleStatus, LifecycleStatus, str]]
    ):
        self.kind = kind
        self.status_type = status_type
        self.initial_status = initial_status

        index: Dict[Tuple[LifecycleStatus, LifecycleStatus], TransitionEdge] = {}
        for from_status, to_status, description in edges:
            if from_status == to_status:
                raise ValueError(f"Self-loop {from_status.value} is not a transition")
            index[(from_status, to_status)] = TransitionEdge(
                from_status=from_status,
                to_status=to_status,
                description=description
            )
        self._index = index

    @property
    def edges(self) -> FrozenSet[TransitionEdge]:
        return frozenset(self._index.values())

    @property
    def statuses(self) -> List[LifecycleStatus]:
        return list(self.status_type)

    def is_valid(self, from_status: LifecycleStatus, to_status: LifecycleStatus) -> bool:
        return (from_status, to_status) in self._index

    def edges_from(self, status: LifecycleStatus) -> FrozenSet[TransitionEdge]:
        return frozenset(e for e in self._index.values() if e.from_status == status)

    def targets_from(self, status: LifecycleStatus) -> List[LifecycleStatus]:
        """Reachable statuses, in declaration order of the status enum"""
        targets = {e.to_status for e in self.edges_from(status)}
        return [s for s in self.status_type if s in targets]

    def describe(self, from_status: LifecycleStatus, to_status: LifecycleStatus) -> Optional[str]:
        edge = self._index.get((from_status, to_status))
        return edge.description if edge else None

    def is_terminal(self, status: LifecycleStatus) -> bool:
        return not self.edges_from(status)


JOB_POST_TRANSITIONS = TransitionRuleTable(
    kind=EntityKind.JOB_POST,
    status_type=JobPostStatus,
    initial_status=JobPostStatus.DRAFT,
    edges=[
        (JobPostStatus.DRAFT, JobPostStatus.OPEN, "Publish job post"),
        (JobPostStatus.DRAFT, JobPostStatus.ARCHIVED, "Cancel draft without publishing"),
        (JobPostStatus.OPEN, JobPostStatus.CLOSED, "Close/fill position"),
        (JobPostStatus.OPEN, JobPostStatus.DRAFT, "Unpublish for major edits"),
        (JobPostStatus.OPEN, JobPostStatus.ARCHIVED, "Cancel active posting"),
        (JobPostStatus.CLOSED, JobPostStatus.ARCHIVED, "Archive completed posting"),
        (JobPostStatus.CLOSED, JobPostStatus.OPEN, "Reopen position"),
        # ARCHIVED is terminal
    ]
)

APPLICATION_TRANSITIONS = TransitionRuleTable(
    kind=EntityKind.APPLICATION,
    status_type=ApplicationStatus,
    initial_status=ApplicationStatus.APPLIED,
    edges=[
        (ApplicationStatus.APPLIED, ApplicationStatus.UNDER_REVIEW, "Application moved to under review"),
        (ApplicationStatus.APPLIED, ApplicationStatus.REJECTED, "Application rejected"),
        (ApplicationStatus.APPLIED, ApplicationStatus.WITHDRAWN, "Application withdrawn by candidate"),
        (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.INTERVIEW_SCHEDULED, "Interview scheduled"),
        (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.REJECTED, "Application rejected after review"),
        (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.WITHDRAWN, "Application withdrawn by candidate"),
        (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.OFFER_EXTENDED, "Offer extended"),
        (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.REJECTED, "Application rejected after interview"),
        (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.WITHDRAWN, "Application withdrawn by candidate"),
        (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.HIRED, "Candidate hired"),
        (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.REJECTED, "Offer declined or withdrawn"),
        (ApplicationStatus.OFFER_EXTENDED, ApplicationStatus.WITHDRAWN, "Application withdrawn by candidate"),
        # HIRED, REJECTED, WITHDRAWN are terminal
    ]
)

RULE_TABLES: Dict[EntityKind, TransitionRuleTable] = {
    EntityKind.JOB_POST: JOB_POST_TRANSITIONS,
    EntityKind.APPLICATION: APPLICATION_TRANSITIONS,
}


def get_rule_table(kind: EntityKind) -> TransitionRuleTable:
    """Get the transition table for an entity kind"""
    return RULE_TABLES[kind]
