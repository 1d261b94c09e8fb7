from fastapi import APIRouter, Depends, Request

from ..schemas import ComparisonRequest, ComparisonResponse, ErrorResponse
from ..services.comparison import ComparisonService

router = APIRouter()


def get_comparison_service(request: Request) -> ComparisonService:
    state = request.app.state
    return ComparisonService(state.settings, state.provider)


@router.post(
    "/analyze",
    response_model=ComparisonResponse,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(payload: ComparisonRequest, service: ComparisonService = Depends(get_comparison_service)):
    """Compare two snippets and return the model's SEO/AEO analysis."""
    outcome = await service.compare(payload)
    return ComparisonResponse(
        result=outcome.normalized.result_text,
        html=outcome.normalized.result_html,
        raw=outcome.raw,
        model=outcome.model,
    )
