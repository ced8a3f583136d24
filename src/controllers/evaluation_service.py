from fastapi.concurrency import run_in_threadpool

from schemas import EvaluationResult, GradingRequest
from utils.document_processor import (
    DocumentProcessor,
    check_extracted_text,
    file_type_from_name,
)
from utils.model_client import ModelClient
from utils.prompts import build_grading_conversation
from utils.response_parser import parse_evaluation

from .config import Settings, logger
from .scratch_storage import scratch_file


document_processor = DocumentProcessor()


async def evaluate_document(
    request: GradingRequest,
    file_name: str,
    content: bytes,
    settings: Settings,
    model_client: ModelClient,
) -> EvaluationResult:
    """Save, extract, prompt, parse. The scratch copy is removed on every exit path.

    The caller has already created ``settings.upload_dir``.
    """
    async with scratch_file(settings.upload_dir, file_name, content) as path:
        file_type = file_type_from_name(file_name)
        logger.info(f"File type: {file_type or 'unknown'}, file name: {file_name}")

        text = await run_in_threadpool(document_processor.extract_text, path, file_type)
        student_work = check_extracted_text(text)

        conversation = build_grading_conversation(
            request.assignment_title,
            request.subject,
            request.instructions,
            request.criteria,
            student_work,
        )
        reply = await model_client.complete(
            conversation, {"temperature": settings.temperature}
        )

        evaluation = parse_evaluation(reply)

    logger.info(f"Evaluated '{request.assignment_title}' ({file_name})")
    return evaluation
