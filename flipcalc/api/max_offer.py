"""
Max offer calculator API endpoints.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from flipcalc.api.dependencies import (
    get_record_store,
    get_require_confirmation,
    raise_for_result,
)
from flipcalc.engines.base import ActionResult, Notice
from flipcalc.engines.max_offer import MaxOfferEngine, MaxOfferState
from flipcalc.services.record_store import RecordStore

router = APIRouter()


class MaxOfferResponse(BaseModel):
    state: MaxOfferState
    results: Dict[str, Any]
    notice: Optional[Notice] = None


class PullRehabRequest(BaseModel):
    """Pull a rehab total into the form, optionally from a picked project."""

    state: MaxOfferState
    pick: Optional[str] = None


class MaxOfferProjectListResponse(BaseModel):
    projects: List[Dict[str, Any]]
    total: int


def engine_response(
    engine: MaxOfferEngine, result: Optional[ActionResult] = None
) -> MaxOfferResponse:
    if result is not None:
        raise_for_result(result)
    return MaxOfferResponse(
        state=engine.state,
        results=engine.results(),
        notice=result.notice if result else None,
    )


@router.post("/calculate", response_model=MaxOfferResponse)
async def calculate(state: MaxOfferState, store: RecordStore = Depends(get_record_store)):
    """Offer table for every LTV tier."""
    return engine_response(MaxOfferEngine(store, state))


@router.post("/pull-rehab", response_model=MaxOfferResponse)
async def pull_rehab(request: PullRehabRequest, store: RecordStore = Depends(get_record_store)):
    """Fill rehab from a saved rehab project."""
    engine = MaxOfferEngine(store, request.state)
    return engine_response(engine, engine.pull_rehab(request.pick))


@router.get("/projects", response_model=MaxOfferProjectListResponse)
async def list_projects(store: RecordStore = Depends(get_record_store)):
    """List saved offers with display labels."""
    projects = MaxOfferEngine(store).list_projects()
    return MaxOfferProjectListResponse(projects=projects, total=len(projects))


@router.post("/projects", response_model=MaxOfferResponse)
async def save_project(state: MaxOfferState, store: RecordStore = Depends(get_record_store)):
    """Save the form, replacing any offer with the same address."""
    engine = MaxOfferEngine(store, state)
    return engine_response(engine, engine.save())


@router.get("/projects/{project_id}", response_model=MaxOfferResponse)
async def load_project(project_id: int, store: RecordStore = Depends(get_record_store)):
    engine = MaxOfferEngine(store)
    return engine_response(engine, engine.load(project_id))


@router.delete("/projects/{project_id}", response_model=MaxOfferResponse)
async def delete_project(
    project_id: int,
    confirm: bool = False,
    store: RecordStore = Depends(get_record_store),
    require_confirmation: bool = Depends(get_require_confirmation),
):
    """Delete a saved offer. Requires confirm=true unless disabled."""
    engine = MaxOfferEngine(store, require_confirmation=require_confirmation)
    return engine_response(engine, engine.delete(project_id, confirm=confirm))


@router.post("/clear-values", response_model=MaxOfferResponse)
async def clear_values(state: MaxOfferState, store: RecordStore = Depends(get_record_store)):
    """Clear ARV and rehab, keeping address and rehab source."""
    engine = MaxOfferEngine(store, state)
    engine.clear_values()
    return engine_response(engine)


@router.post("/clear-rehab-source", response_model=MaxOfferResponse)
async def clear_rehab_source(
    state: MaxOfferState, store: RecordStore = Depends(get_record_store)
):
    engine = MaxOfferEngine(store, state)
    engine.clear_rehab_source()
    return engine_response(engine)


@router.post("/reset", response_model=MaxOfferResponse)
async def reset(store: RecordStore = Depends(get_record_store)):
    """Blank form."""
    engine = MaxOfferEngine(store)
    engine.reset_form()
    return engine_response(engine)
