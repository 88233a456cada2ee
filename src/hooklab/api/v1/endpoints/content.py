# src/hooklab/api/v1/endpoints/content.py
"""Full-content endpoints (step two of blind selection)."""

from fastapi import APIRouter

from hooklab.api.v1.dependencies import WorkflowDep
from hooklab.api.v1.errors import raise_for_failure
from hooklab.schemas.content import ContentGenerateRequest, ContentGenerateResponse

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/generate", response_model=ContentGenerateResponse)
async def generate_content(
    request: ContentGenerateRequest,
    workflow: WorkflowDep,
) -> ContentGenerateResponse:
    """Spend a credit on the selected hook and reveal the full post."""
    outcome = await workflow.reveal(
        request.wallet_address,
        request.topic,
        request.selected_hook,
    )
    raise_for_failure(outcome)

    return ContentGenerateResponse(
        hook=request.selected_hook,
        full_content=outcome.result.content,
        source=outcome.result.source,
        is_premium=outcome.is_premium,
        remaining_credits=outcome.remaining_credits,
        usage_logged=outcome.usage_logged,
    )
