from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.organization_schema import Agency, Company

agency_translator = EntityTranslator(
    "agencies",
    Agency,
    [
        Field("id", required=True),
        Field("name", required=True),
        Field("slug", required=True),
        Field("logo_url"),
        Field("is_active", legacy=None, default=True),
        Field("created_at"),
        Field("updated_at"),
    ],
)

# legacy recruiter module calls client companies "members"
company_translator = EntityTranslator(
    "companies",
    Company,
    [
        Field("id", legacy="company_id", required=True),
        Field("name", legacy="company", required=True),
        Field("slug", legacy=None),
        Field("agency_id"),
        Field("is_active", legacy=None, default=True),
        Field("created_at"),
        Field("updated_at"),
    ],
    derive={"slug": lambda v: v["slug"] or f"company-{v['id']}"},
)
