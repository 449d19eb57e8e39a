from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.application_schema import Application, ApplicationStatus
from cutover.translators import vocabulary

application_translator = EntityTranslator(
    "applications",
    Application,
    [
        Field("id", required=True),
        Field("candidate_id", legacy="user_id", required=True),
        Field("job_id", required=True),
        Field("resume_id"),
        Field(
            "status",
            read=vocabulary.application_status,
            write=vocabulary.legacy_application_status,
            default=ApplicationStatus.SUBMITTED,
        ),
        Field("cover_letter", legacy=None),
        Field("notes", legacy=None),
        Field("applied_at", legacy=None),
        Field("created_at"),
        Field("updated_at"),
    ],
    derive={"applied_at": lambda v: v["applied_at"] or v["created_at"]},
)
