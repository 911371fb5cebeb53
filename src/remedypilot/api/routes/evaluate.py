"""Situation evaluation endpoint."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException

import remedypilot
from remedypilot.canon import content_hash_short
from remedypilot.engine import PolicyProvider, evaluate, get_default_provider
from remedypilot.exceptions import (
    PolicyIntegrityError,
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    UnsupportedDomain,
    UnsupportedJurisdiction,
)

from ..schemas.requests import EvaluateRequest
from ..schemas.responses import EvaluateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluate", tags=["Evaluation"])

# Shared provider instance (set by main.py)
provider: Optional[PolicyProvider] = None


def set_provider(p: PolicyProvider):
    global provider
    provider = p


@router.post("", response_model=EvaluateResponse)
async def evaluate_situation(request: EvaluateRequest):
    """
    Evaluate a situation against its jurisdiction's rules.

    Returns the verdict (criminal relief) or defense assessment (eviction
    defense) with a content hash for audit. An unregistered jurisdiction
    is a 400 listing the supported codes.
    """
    active = provider or get_default_provider()
    try:
        verdict = evaluate(
            request.situation,
            domain=request.domain,
            jurisdiction=request.jurisdiction,
            provider=active,
            as_of=request.as_of,
        )
    except UnsupportedJurisdiction as e:
        raise HTTPException(
            status_code=400,
            detail={**e.to_dict(), "supportedJurisdictions": e.supported},
        )
    except UnsupportedDomain as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except (PolicyIntegrityError, PolicyLoadError, PolicyValidationError, PolicyVersionMismatch) as e:
        logger.error("Evaluation failed: %s", e, extra={"jurisdiction": e.jurisdiction})
        raise HTTPException(status_code=500, detail=e.to_dict())

    policy = active.get_policy(verdict.jurisdiction, verdict.domain)
    payload = verdict.to_dict()
    verdict_hash = verdict.fingerprint()
    logger.info(
        "Served %s verdict",
        verdict.domain.value,
        extra={
            "domain": verdict.domain.value,
            "jurisdiction": verdict.jurisdiction,
            "status": verdict.status.value,
            "verdict_hash_short": content_hash_short(payload),
        },
    )

    return EvaluateResponse(
        domain=verdict.domain.value,
        jurisdiction=verdict.jurisdiction,
        policy_version=verdict.policy_version,
        policy_pack_hash=policy.pack_hash,
        verdict_hash=verdict_hash,
        verdict=payload,
        evaluated_at=datetime.now(timezone.utc).isoformat(),
        engine_version=remedypilot.__version__,
    )
