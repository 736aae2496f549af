# sana/routers/environment.py
from fastapi import APIRouter, HTTPException, Query, Request, status

from ..schemas.common import AggregationSnapshot, Coordinate
from ..schemas.requests import AuthorizationState, AuthorizationUpdate, CycleAccepted
from ..services.aggregation import Aggregator
from ..services.location import LocationNotAuthorized, LocationSource

router = APIRouter(prefix="/environment", tags=["environment"])


def _aggregator(request: Request) -> Aggregator:
    return request.app.state.aggregator

def _location(request: Request) -> LocationSource:
    return request.app.state.location


@router.get("", response_model=AggregationSnapshot)
async def current_snapshot(request: Request):
    return _aggregator(request).state.snapshot


@router.get("/changes", response_model=AggregationSnapshot)
async def wait_for_changes(
    request: Request,
    since: int = Query(0, ge=0),
    timeout: float = Query(25.0, gt=0, le=60),
):
    # long-poll: returns as soon as version > since, or the unchanged snapshot on timeout
    return await _aggregator(request).state.wait_for_change(since, timeout)


@router.get("/authorization", response_model=AuthorizationState)
async def get_authorization(request: Request):
    return AuthorizationState(granted=_location(request).granted)


@router.put("/authorization", response_model=AuthorizationState)
async def set_authorization(body: AuthorizationUpdate, request: Request):
    source = _location(request)
    source.set_authorization(body.granted)
    return AuthorizationState(granted=source.granted)


@router.post("/location", response_model=CycleAccepted, status_code=status.HTTP_202_ACCEPTED)
async def publish_location(coordinate: Coordinate, request: Request):
    try:
        _location(request).publish(coordinate)
    except LocationNotAuthorized as e:
        raise HTTPException(status_code=409, detail=str(e))
    return CycleAccepted(detail="location queued")


@router.post("/refresh", response_model=CycleAccepted, status_code=status.HTTP_202_ACCEPTED)
async def refresh(request: Request):
    if not _location(request).granted:
        raise HTTPException(status_code=409, detail="location authorization has not been granted")
    cycle = _aggregator(request).refresh()
    if cycle is None:
        raise HTTPException(status_code=409, detail="no location received yet")
    return CycleAccepted(cycle=cycle, detail="refresh started")
