from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.job_schema import Job
from cutover.translators import vocabulary


def job_slug(values) -> str:
    return values["slug"] or f"job-{values['id']}"


job_translator = EntityTranslator(
    "jobs",
    Job,
    [
        Field("id", required=True),
        Field("agency_id"),
        Field("company_id"),
        Field("title", legacy="job_title", required=True),
        Field("slug", legacy=None),
        Field("description", legacy="job_description"),
        Field("requirements", factory=list),
        Field("responsibilities", factory=list),
        Field("benefits", factory=list),
        Field("salary_min"),
        Field("salary_max"),
        Field("salary_type", default="monthly"),
        Field("currency", default="PHP"),
        Field("work_arrangement"),
        Field(
            "work_type",
            read=vocabulary.work_type,
            write=vocabulary.legacy_work_type,
            default="full_time",
        ),
        Field("shift", default="day"),
        Field("experience_level"),
        Field("status", default="active"),
        Field("views", default=0),
        Field("applicants_count", legacy="applicants", default=0),
        Field("created_at"),
        Field("updated_at"),
    ],
    derive={"slug": job_slug},
)
