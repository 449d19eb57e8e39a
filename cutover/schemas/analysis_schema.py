from typing import Any, Dict, List, Optional

from cutover.schemas.common import CanonicalModel, UtcDateTime


class AiAnalysis(CanonicalModel):
    """Scored review of a candidate's resume."""
    id: str
    candidate_id: str
    resume_id: Optional[str] = None
    session_id: Optional[str] = None
    overall_score: int
    ats_compatibility_score: Optional[int] = None
    content_quality_score: Optional[int] = None
    professional_presentation_score: Optional[int] = None
    skills_alignment_score: Optional[int] = None
    key_strengths: List[Any] = []
    strengths_analysis: Dict[str, Any] = {}
    improvements: List[Any] = []
    recommendations: List[Any] = []
    section_analysis: Dict[str, Any] = {}
    improved_summary: Optional[str] = None
    salary_analysis: Optional[Dict[str, Any]] = None
    career_path: Optional[Dict[str, Any]] = None
    candidate_profile_snapshot: Optional[Dict[str, Any]] = None
    skills_snapshot: Optional[Any] = None
    experience_snapshot: Optional[Any] = None
    education_snapshot: Optional[Any] = None
    portfolio_links: Optional[Any] = None
    files_analyzed: Optional[Any] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class JobMatch(CanonicalModel):
    id: str
    candidate_id: str
    job_id: str
    overall_score: int
    breakdown: Dict[str, Any] = {}
    reasoning: Optional[str] = None
    # the legacy table keeps no review state
    status: str = "pending"
    analyzed_at: Optional[UtcDateTime] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None
