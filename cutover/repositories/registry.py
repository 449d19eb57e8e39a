"""
Family registry and the restore/backup order derived from legacy foreign keys.
"""
from graphlib import TopologicalSorter
from typing import Dict, Iterable, List, Mapping, Optional

from cutover.core.flags import FAMILIES, FeatureFlags
from cutover.db.base import Base
from cutover.repositories.analysis_repo import AnalysisRepository, JobMatchRepository
from cutover.repositories.application_repo import ApplicationRepository
from cutover.repositories.assessment_repo import AssessmentRepository
from cutover.repositories.base import RoutedRepository
from cutover.repositories.candidate_repo import CandidateRepository
from cutover.repositories.job_repo import JobRepository
from cutover.repositories.organization_repo import AgencyRepository, CompanyRepository
from cutover.repositories.profile_repo import ProfileRepository
from cutover.repositories.resume_repo import ResumeRepository

REPOSITORY_CLASSES = {
    "agencies": AgencyRepository,
    "companies": CompanyRepository,
    "candidates": CandidateRepository,
    "jobs": JobRepository,
    "profiles": ProfileRepository,
    "resumes": ResumeRepository,
    "applications": ApplicationRepository,
    "assessments": AssessmentRepository,
    "job_matches": JobMatchRepository,
    "ai_analyses": AnalysisRepository,
}


def build_repositories(flags: FeatureFlags, session_factory=None, service=None, event_log=None,
                       settings=None) -> Dict[str, RoutedRepository]:
    return {
        family: cls(flags, session_factory=session_factory, service=service,
                    event_log=event_log, settings=settings)
        for family, cls in REPOSITORY_CLASSES.items()
    }


def _rank(family: str):
    if family in FAMILIES:
        return (0, FAMILIES.index(family), family)
    return (1, 0, family)


def dependency_order(families: Iterable[str], repositories: Optional[Mapping[str, object]] = None) -> List[str]:
    """Parents before children, from foreign keys between the families' legacy tables.

    Families that become ready together keep registry order. Families without
    a repository have no edges and sort last.
    """
    repositories = repositories if repositories is not None else REPOSITORY_CLASSES
    families = list(dict.fromkeys(families))

    owner: Dict[str, str] = {}
    for family in sorted(repositories, key=_rank):
        for table in repositories[family].legacy_tables:
            owner.setdefault(table, family)

    graph: Dict[str, set] = {family: set() for family in families}
    for family in families:
        repo = repositories.get(family)
        if repo is None:
            continue
        for table_name in repo.legacy_tables:
            table = Base.metadata.tables.get(table_name)
            if table is None:
                continue
            for fk in table.foreign_keys:
                parent = owner.get(fk.column.table.name)
                if parent is not None and parent != family and parent in graph:
                    graph[family].add(parent)

    sorter = TopologicalSorter(graph)
    sorter.prepare()
    order: List[str] = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready(), key=_rank)
        order.extend(ready)
        sorter.done(*ready)
    return order
