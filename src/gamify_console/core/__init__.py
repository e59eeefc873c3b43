"""Core / service layer — domain models, the campaign service and the
input resolver.

Rules
-----
* No terminal output.
* No filesystem or network I/O (the transport does that).
* No imports from ``cli`` or ``infra``.
"""

from gamify_console.core.campaign_service import CampaignService, Endpoint
from gamify_console.core.models import (
    AnswerSet,
    Campaign,
    DateTimePair,
    FreeTextAnswer,
    ListQuery,
    NewCampaign,
    RawResponse,
    Respondent,
    Scope,
    Session,
)
from gamify_console.core.protocols import Transport

__all__: list[str] = [
    "AnswerSet",
    "Campaign",
    "CampaignService",
    "DateTimePair",
    "Endpoint",
    "FreeTextAnswer",
    "ListQuery",
    "NewCampaign",
    "RawResponse",
    "Respondent",
    "Scope",
    "Session",
    "Transport",
]
