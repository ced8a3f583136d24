import json
from typing import Any, Dict

from pydantic import ValidationError

from controllers.config import logger
from controllers.errors import InvalidModelResponse
from schemas import EvaluationResult


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first JSON object embedded in free-form model output."""
    start = text.find("{") if text else -1
    if start == -1:
        raise InvalidModelResponse("Model response contains no JSON object")

    try:
        data, _ = json.JSONDecoder().raw_decode(text, start)
    except json.JSONDecodeError:
        # Fall back to the widest span, first "{" to last "}"
        end = text.rfind("}")
        if end <= start:
            raise InvalidModelResponse("Model response contains no JSON object")
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse model response as JSON: {str(e)}")
            raise InvalidModelResponse(f"Model response is not valid JSON: {str(e)}")

    if not isinstance(data, dict):
        raise InvalidModelResponse("Model response JSON is not an object")
    return data


def parse_evaluation(text: str) -> EvaluationResult:
    data = extract_json_object(text)
    try:
        return EvaluationResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Model response failed evaluation schema: {str(e)}")
        raise InvalidModelResponse(
            f"Model response is missing required evaluation fields: {str(e)}"
        )
