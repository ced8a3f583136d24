from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)
from typing import Any, List, Optional, Union

from controllers.config import logger


# Requests used by routes
class GradingRequest(BaseModel):
    assignment_title: str = "Untitled assignment"
    subject: str = "General"
    instructions: str = ""
    criteria: str = ""


class DetailedCorrection(BaseModel):
    original: str
    correction: str
    explanation: Optional[str] = None


class EvaluationResult(BaseModel):
    """Grading outcome as produced by the model.

    Needs a mark (``score`` or ``grade``) and some written assessment
    (``summary``, ``feedback`` or ``detailedAnalysis``). Unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    score: Optional[Union[int, float, str]] = None
    grade: Optional[Union[str, int, float]] = None
    summary: Optional[str] = None
    feedback: Optional[str] = None
    detailedAnalysis: Optional[str] = None
    strengths: Optional[List[str]] = None
    weaknesses: Optional[List[str]] = None
    improvements: Optional[List[str]] = None
    detailed_corrections: Optional[List[DetailedCorrection]] = None

    @field_validator("strengths", "weaknesses", "improvements", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("detailed_corrections", mode="before")
    @classmethod
    def _drop_malformed_corrections(cls, value: Any) -> Any:
        # Corrections are optional; a bad entry must not sink the whole grade
        if value is None:
            return None
        if not isinstance(value, list):
            logger.warning(f"Ignoring non-list detailed_corrections: {value!r}")
            return None
        kept = []
        for item in value:
            try:
                kept.append(DetailedCorrection.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping malformed correction {item!r}: {e}")
        return kept

    @model_validator(mode="after")
    def _check_required_groups(self) -> "EvaluationResult":
        if self.score is None and self.grade is None:
            raise ValueError("evaluation has neither 'score' nor 'grade'")
        if not (self.summary or self.feedback or self.detailedAnalysis):
            raise ValueError(
                "evaluation has none of 'summary', 'feedback', 'detailedAnalysis'"
            )
        return self


class ErrorResponse(BaseModel):
    error: str
