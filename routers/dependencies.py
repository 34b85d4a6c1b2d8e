from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.ai.labeling_oracles import (
    ClassificationOracle,
    OppositionOracle,
    build_classification_oracle,
    build_opposition_oracle,
)
from infrastructure.context import LabelingScope, RequestContextBundle
from infrastructure.database.database import get_db
from services.labeling import LabelingService
from config import settings
import hmac


async def get_request_context_bundle(
    db: AsyncSession = Depends(get_db),
) -> RequestContextBundle:
    scope = LabelingScope(namespace=settings.LABELING_NAMESPACE)
    return RequestContextBundle(db=db, scope=scope)


@lru_cache(maxsize=1)
def get_classification_oracle() -> ClassificationOracle:
    return build_classification_oracle()


@lru_cache(maxsize=1)
def get_opposition_oracle() -> OppositionOracle:
    return build_opposition_oracle()


async def get_labeling_service(
    context_bundle: RequestContextBundle = Depends(get_request_context_bundle),
    classification_oracle: ClassificationOracle = Depends(get_classification_oracle),
    opposition_oracle: OppositionOracle = Depends(get_opposition_oracle),
) -> LabelingService:
    return LabelingService(
        context_bundle.db,
        context_bundle.scope,
        classification_oracle=classification_oracle,
        opposition_oracle=opposition_oracle,
    )


async def require_api_key(x_api_key: Optional[str] = Header(None, alias="X-API-Key")) -> None:
    expected_raw = settings.API_AUTH_TOKEN
    expected = expected_raw.strip().strip('"') if expected_raw else ""
    if not expected:
        # No API key configured; allow all requests.
        return
    provided = x_api_key.strip().strip('"') if x_api_key else ""
    if not provided or not hmac.compare_digest(provided, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
