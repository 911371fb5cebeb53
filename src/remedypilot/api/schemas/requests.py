"""Request schemas for the API."""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field


class EvaluateRequest(BaseModel):
    """Request to evaluate a legal situation."""
    domain: str = Field(..., description="criminal-relief|eviction-defense")
    jurisdiction: Optional[str] = Field(
        default=None,
        description="Jurisdiction code, e.g. 'TN'; overrides any code inside the situation",
    )
    situation: dict[str, Any] = Field(
        default_factory=dict,
        description="Form fields as submitted (camelCase or snake_case)",
    )
    as_of: Optional[date] = Field(
        default=None,
        description="Evaluate as of this date instead of today (ISO format: YYYY-MM-DD)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "domain": "eviction-defense",
                    "jurisdiction": "TN",
                    "situation": {
                        "evictionReason": "non-payment of rent",
                        "noticeDate": "2024-03-01",
                        "filingDate": "2024-03-11",
                        "courtDate": "2024-03-25",
                    },
                },
                {
                    "domain": "criminal-relief",
                    "jurisdiction": "TN",
                    "situation": {"outcome": "dismissed", "chargeType": "theft"},
                },
            ]
        }
    }
