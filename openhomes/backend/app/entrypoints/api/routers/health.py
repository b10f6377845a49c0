# app/entrypoints/api/routers/health.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_source, get_trademe_config
from ....config import TradeMeConfig
from ....schemas import HealthOut
from ....service_layer.sources import OpenHomeSource

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(
    source: OpenHomeSource = Depends(get_source),
    cfg: TradeMeConfig = Depends(get_trademe_config),
) -> HealthOut:
    return HealthOut(status="ok", dataSource=source.name, credentialsConfigured=cfg.has_credentials)
