from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from controllers.config import Settings, get_settings, logger
from controllers.errors import MissingFields, MissingFile
from controllers.evaluation_service import evaluate_document
from controllers.scratch_storage import ensure_upload_dir
from schemas import ErrorResponse, GradingRequest
from utils.model_client import ModelClient, create_model_client


router = APIRouter(prefix="/api", tags=["Evaluation"])


async def get_model_client(settings: Settings = Depends(get_settings)):
    model_client = create_model_client(settings)
    try:
        yield model_client
    finally:
        await model_client.aclose()


@router.post(
    "/evaluate",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def evaluate_submission(
    file: UploadFile = File(None),
    assignmentTitle: str = Form(None),
    subject: str = Form(None),
    instructions: str = Form(None),
    criteria: str = Form(None),
    settings: Settings = Depends(get_settings),
    model_client: ModelClient = Depends(get_model_client),
):
    """Grade an uploaded PDF or DOCX against the given instructions and criteria."""
    ensure_upload_dir(settings.upload_dir)

    if file is None or not file.filename:
        raise MissingFile()

    if settings.strict_field_validation:
        missing = [
            name
            for name, value in (("instructions", instructions), ("criteria", criteria))
            if not value or not value.strip()
        ]
        if missing:
            raise MissingFields(missing)

    request = GradingRequest(
        assignment_title=assignmentTitle or "Untitled assignment",
        subject=subject or "General",
        instructions=instructions or "",
        criteria=criteria or "",
    )
    logger.info(
        f"Evaluating upload {file.filename} for assignment '{request.assignment_title}'"
    )

    content = await file.read()
    evaluation = await evaluate_document(
        request, file.filename, content, settings, model_client
    )
    # Only keys the model actually sent, explicit nulls included
    return JSONResponse(content=evaluation.model_dump(mode="json", exclude_unset=True))
