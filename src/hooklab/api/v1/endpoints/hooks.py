# src/hooklab/api/v1/endpoints/hooks.py
"""Hook generation endpoints (step one of blind selection)."""

from fastapi import APIRouter

from hooklab.api.v1.dependencies import WorkflowDep
from hooklab.api.v1.errors import raise_for_failure
from hooklab.schemas.hooks import HookGenerateRequest, HookGenerateResponse
from hooklab.services.gating import hooks_of

router = APIRouter(prefix="/hooks", tags=["hooks"])


@router.post("/generate", response_model=HookGenerateResponse)
async def generate_hooks(
    request: HookGenerateRequest,
    workflow: WorkflowDep,
) -> HookGenerateResponse:
    """Generate hook candidates for a topic.

    When a wallet is supplied its balance is checked, but nothing is spent
    until a hook is revealed.
    """
    outcome = await workflow.generate_hooks(request.topic, request.wallet_address)
    raise_for_failure(outcome)

    return HookGenerateResponse(
        hooks=hooks_of(outcome),
        trend_data_available=bool(outcome.trend and outcome.trend.available),
        source=outcome.result.source,
        is_premium=outcome.is_premium if request.wallet_address else None,
        remaining_credits=outcome.remaining_credits,
    )
