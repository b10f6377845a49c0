# app/entrypoints/api/routers/open_homes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..deps import get_source
from ....errors import NotFoundError, OpenHomesError, SyncUnsupportedError
from ....schemas import OpenHomeIn, OpenHomeOut, SyncResult
from ....service_layer.sources import OpenHomeSource

log = logging.getLogger(__name__)

router = APIRouter(tags=["open-homes"])


def _failure(message: str, err: Exception) -> JSONResponse:
    if isinstance(err, OpenHomesError):
        log.error("%s: %s", message, err)
    else:
        log.exception("%s: unexpected %s", message, type(err).__name__)
    return JSONResponse(status_code=500, content={"message": message, "error": str(err)})


@router.get("/api/open-homes", response_model=list[OpenHomeOut])
async def list_open_homes(source: OpenHomeSource = Depends(get_source)):
    try:
        homes = await source.list_open_homes()
    except Exception as e:
        return _failure("Failed to fetch open homes from TradeMe API", e)
    return [OpenHomeOut.from_summary(h) for h in homes]


# Registered before /{home_id} so "sync" is never read as an id.
@router.api_route("/api/open-homes/sync", methods=["GET", "POST"], response_model=SyncResult)
async def sync_open_homes(
    body: list[OpenHomeIn] | None = Body(default=None),
    source: OpenHomeSource = Depends(get_source),
):
    summaries = [item.to_summary() for item in body] if body else None
    try:
        count = await source.sync(summaries)
    except SyncUnsupportedError:
        return JSONResponse(
            status_code=409,
            content={"message": "Sync is only available with the cached data source"},
        )
    except Exception as e:
        return _failure("Failed to sync open homes", e)
    return SyncResult(message="Open homes synced successfully", count=count)


@router.get("/api/open-homes/{home_id}", response_model=OpenHomeOut)
async def get_open_home(home_id: str, source: OpenHomeSource = Depends(get_source)):
    try:
        home = await source.get_open_home(home_id)
        if home is None:
            raise NotFoundError(home_id)
    except NotFoundError:
        return JSONResponse(status_code=404, content={"message": "Home not found"})
    except Exception as e:
        return _failure("Failed to fetch open home", e)
    return OpenHomeOut.from_summary(home)
