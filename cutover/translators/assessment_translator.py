"""
Assessment sessions: one legacy table and one hosted table per kind.

The kind-specific measurements are folded into the canonical `results`
mapping so callers see one shape for every kind.
"""
from typing import Any, Dict, Mapping, Tuple

from cutover.core.translator import WHOLE_ROW, EntityTranslator, Field
from cutover.schemas.assessment_schema import Assessment

# (results key, legacy column)
DISC_RESULTS: Tuple[Tuple[str, str], ...] = (
    ("total_questions", "total_questions"),
    ("d_score", "d_score"),
    ("i_score", "i_score"),
    ("s_score", "s_score"),
    ("c_score", "c_score"),
    ("primary_type", "primary_type"),
    ("secondary_type", "secondary_type"),
    ("cultural_alignment", "cultural_alignment"),
    ("ai_assessment", "ai_assessment"),
)

TYPING_RESULTS: Tuple[Tuple[str, str], ...] = (
    ("difficulty_level", "difficulty_level"),
    ("points", "score"),
    ("overall_accuracy", "overall_accuracy"),
    ("longest_streak", "longest_streak"),
    ("correct_words", "correct_words"),
    ("wrong_words", "wrong_words"),
    ("words_correct", "words_correct"),
    ("words_incorrect", "words_incorrect"),
    ("ai_analysis", "ai_analysis"),
)


def results_reader(columns):
    def read(row) -> Dict[str, Any]:
        return {key: getattr(row, column, None) for key, column in columns}
    return read


def results_writer(columns):
    def write(results: Mapping[str, Any]) -> Dict[str, Any]:
        results = results or {}
        return {column: results[key] for key, column in columns if key in results}
    return write


def _session_fields(*kind_fields: Field):
    return [
        Field("id", required=True),
        Field("candidate_id", legacy="user_id", required=True),
        Field("kind", legacy=None, service=None),
        Field("session_status", default="completed"),
        *kind_fields,
        Field("xp_earned", legacy=None, default=0),
        Field("created_at"),
    ]


disc_translator = EntityTranslator(
    "assessments",
    Assessment,
    _session_fields(
        Field("started_at"),
        Field("finished_at"),
        Field("duration_seconds"),
        Field("score", legacy="confidence_score"),
        Field(
            "results",
            legacy=WHOLE_ROW,
            read=results_reader(DISC_RESULTS),
            write=results_writer(DISC_RESULTS),
            factory=dict,
        ),
    ),
    derive={"kind": lambda v: "disc"},
)

typing_translator = EntityTranslator(
    "assessments",
    Assessment,
    _session_fields(
        Field("started_at", legacy=None),
        Field("finished_at", legacy=None),
        Field("duration_seconds", legacy="elapsed_time"),
        Field("score", legacy="wpm"),
        Field(
            "results",
            legacy=WHOLE_ROW,
            read=results_reader(TYPING_RESULTS),
            write=results_writer(TYPING_RESULTS),
            factory=dict,
        ),
    ),
    derive={"kind": lambda v: "typing"},
)
