from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.resume_schema import Resume

resume_translator = EntityTranslator(
    "resumes",
    Resume,
    [
        Field("id", required=True),
        Field("candidate_id", legacy="user_id", required=True),
        Field("slug", legacy="resume_slug", required=True),
        Field("title", legacy="resume_title"),
        Field("extracted_data", legacy="resume_data"),
        Field("generated_data", legacy="generated_resume_data"),
        Field("original_filename"),
        Field("template_used"),
        Field("is_primary", default=False),
        Field("is_public", default=False),
        Field("view_count", default=0),
        Field("created_at"),
        Field("updated_at"),
    ],
)
