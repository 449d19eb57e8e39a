from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.candidate_schema import Candidate

# full_name is computed on Candidate from the name parts; the legacy column is
# kept in step by the repository and the hosted column is generated.
candidate_translator = EntityTranslator(
    "candidates",
    Candidate,
    [
        Field("id", required=True),
        Field("email", required=True),
        Field("first_name", default=""),
        Field("last_name", default=""),
        Field("phone"),
        Field("avatar_url"),
        Field("username"),
        Field("slug"),
        Field("is_active", legacy=None, default=True),
        Field("email_verified", legacy=None, default=False),
        Field("created_at"),
        Field("updated_at"),
    ],
)
