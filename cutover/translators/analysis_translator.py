from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.analysis_schema import AiAnalysis, JobMatch

analysis_translator = EntityTranslator(
    "ai_analyses",
    AiAnalysis,
    [
        Field("id", required=True),
        Field("candidate_id", legacy="user_id", required=True),
        Field("resume_id", legacy="original_resume_id"),
        Field("session_id"),
        Field("overall_score", required=True),
        Field("ats_compatibility_score"),
        Field("content_quality_score"),
        Field("professional_presentation_score"),
        Field("skills_alignment_score"),
        Field("key_strengths", factory=list),
        Field("strengths_analysis", factory=dict),
        Field("improvements", factory=list),
        Field("recommendations", factory=list),
        Field("section_analysis", factory=dict),
        Field("improved_summary"),
        Field("salary_analysis"),
        Field("career_path"),
        Field("candidate_profile_snapshot", legacy="candidate_profile"),
        Field("skills_snapshot"),
        Field("experience_snapshot"),
        Field("education_snapshot"),
        Field("portfolio_links"),
        Field("files_analyzed"),
        Field("created_at"),
        Field("updated_at"),
    ],
)

job_match_translator = EntityTranslator(
    "job_matches",
    JobMatch,
    [
        Field("id", required=True),
        Field("candidate_id", legacy="user_id", required=True),
        Field("job_id", required=True),
        Field("overall_score", legacy="score", required=True),
        Field("breakdown", factory=dict),
        Field("reasoning"),
        Field("status", legacy=None, default="pending"),
        Field("analyzed_at"),
        Field("created_at"),
        Field("updated_at", legacy=None),
    ],
)
