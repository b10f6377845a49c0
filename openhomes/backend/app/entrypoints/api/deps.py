# app/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Request

from ...config import TradeMeConfig
from ...service_layer.sources import OpenHomeSource


def get_source(request: Request) -> OpenHomeSource:
    # selected once in create_app()
    return request.app.state.source


def get_trademe_config(request: Request) -> TradeMeConfig:
    return request.app.state.trademe_config
