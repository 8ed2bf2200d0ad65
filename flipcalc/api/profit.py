"""
Profit calculator API endpoints.
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
from flipcalc.engines.profit import ProfitEngine, ProfitState
from flipcalc.services.record_store import RecordStore

router = APIRouter()


class ProfitResponse(BaseModel):
    state: ProfitState
    results: Dict[str, Any]
    notice: Optional[Notice] = None


class PullRequest(BaseModel):
    """Pull a figure from another calculator, matching on address."""

    state: ProfitState
    address: Optional[str] = None  # defaults to the form's address


class ProfitProjectListResponse(BaseModel):
    projects: List[Dict[str, Any]]
    total: int


def engine_response(engine: ProfitEngine, result: Optional[ActionResult] = None) -> ProfitResponse:
    if result is not None:
        raise_for_result(result)
    return ProfitResponse(
        state=engine.state,
        results=engine.results(),
        notice=result.notice if result else None,
    )


@router.post("/calculate", response_model=ProfitResponse)
async def calculate(state: ProfitState, store: RecordStore = Depends(get_record_store)):
    """Gross and net profit breakdown for a form."""
    return engine_response(ProfitEngine(store, state))


@router.post("/pull-arv", response_model=ProfitResponse)
async def pull_arv(request: PullRequest, store: RecordStore = Depends(get_record_store)):
    """Fill ARV from a saved max offer."""
    engine = ProfitEngine(store, request.state)
    return engine_response(engine, engine.pull_arv(request.address))


@router.post("/pull-rehab", response_model=ProfitResponse)
async def pull_rehab(request: PullRequest, store: RecordStore = Depends(get_record_store)):
    """Fill rehab from a saved rehab project."""
    engine = ProfitEngine(store, request.state)
    return engine_response(engine, engine.pull_rehab(request.address))


@router.get("/projects", response_model=ProfitProjectListResponse)
async def list_projects(store: RecordStore = Depends(get_record_store)):
    projects = ProfitEngine(store).list_projects()
    return ProfitProjectListResponse(projects=projects, total=len(projects))


@router.post("/projects", response_model=ProfitResponse)
async def save_project(state: ProfitState, store: RecordStore = Depends(get_record_store)):
    """Save the form; updates the loaded project when selected_id is set."""
    engine = ProfitEngine(store, state)
    return engine_response(engine, engine.save())


@router.get("/projects/{project_id}", response_model=ProfitResponse)
async def load_project(project_id: int, store: RecordStore = Depends(get_record_store)):
    engine = ProfitEngine(store)
    return engine_response(engine, engine.load(project_id))


@router.delete("/projects/{project_id}", response_model=ProfitResponse)
async def delete_project(
    project_id: int,
    confirm: bool = False,
    store: RecordStore = Depends(get_record_store),
    require_confirmation: bool = Depends(get_require_confirmation),
):
    """Delete a saved profit project. Requires confirm=true unless disabled."""
    engine = ProfitEngine(store, require_confirmation=require_confirmation)
    return engine_response(engine, engine.delete(project_id, confirm=confirm))


@router.post("/reset", response_model=ProfitResponse)
async def reset(store: RecordStore = Depends(get_record_store)):
    """Form with default assumptions."""
    engine = ProfitEngine(store)
    engine.reset_form()
    return engine_response(engine)
