"""
Rehab calculator API endpoints.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from flipcalc.api.dependencies import (
    get_record_store,
    get_require_confirmation,
    raise_for_result,
)
from flipcalc.engines.base import ActionResult, Notice
from flipcalc.engines.rehab import RehabEngine, RehabState
from flipcalc.services.record_store import RecordStore

router = APIRouter()


class RehabResponse(BaseModel):
    """Form state, derived figures and the action's notice."""

    state: RehabState
    results: Dict[str, Any]
    notice: Optional[Notice] = None


class RehabProjectListResponse(BaseModel):
    projects: List[str]
    total: int


class ItemUpdate(BaseModel):
    """Change one field of one line item."""

    state: RehabState
    field: str  # included, rate or cost
    value: Any = None


def engine_response(engine: RehabEngine, result: Optional[ActionResult] = None) -> RehabResponse:
    if result is not None:
        raise_for_result(result)
    return RehabResponse(
        state=engine.state,
        results=engine.results(),
        notice=result.notice if result else None,
    )


@router.post("/calculate", response_model=RehabResponse)
async def calculate(state: RehabState, store: RecordStore = Depends(get_record_store)):
    """Recalculate the rehab total for a form."""
    return engine_response(RehabEngine(store, state))


@router.get("/projects", response_model=RehabProjectListResponse)
async def list_projects(store: RecordStore = Depends(get_record_store)):
    """List saved rehab project addresses, sorted."""
    projects = RehabEngine(store).list_saved()
    return RehabProjectListResponse(projects=projects, total=len(projects))


@router.post("/projects", response_model=RehabResponse)
async def save_project(state: RehabState, store: RecordStore = Depends(get_record_store)):
    """Save the form under its address."""
    engine = RehabEngine(store, state)
    return engine_response(engine, engine.save())


@router.get("/projects/{address:path}", response_model=RehabResponse)
async def load_project(address: str, store: RecordStore = Depends(get_record_store)):
    """Load a saved rehab project into a fresh form."""
    engine = RehabEngine(store)
    return engine_response(engine, engine.load(address))


@router.delete("/projects/{address:path}", response_model=RehabResponse)
async def delete_project(
    address: str,
    confirm: bool = False,
    store: RecordStore = Depends(get_record_store),
    require_confirmation: bool = Depends(get_require_confirmation),
):
    """Delete a saved rehab project. Requires confirm=true unless disabled."""
    engine = RehabEngine(store, require_confirmation=require_confirmation)
    return engine_response(engine, engine.delete(address, confirm=confirm))


@router.post("/clear", response_model=RehabResponse)
async def clear(state: RehabState, store: RecordStore = Depends(get_record_store)):
    """Untoggle all items and reset square footage and scope."""
    engine = RehabEngine(store, state)
    engine.clear()
    return engine_response(engine)


@router.post("/items/{item_id}", response_model=RehabResponse)
async def update_item(
    item_id: int,
    update: ItemUpdate,
    store: RecordStore = Depends(get_record_store),
):
    """Toggle a line item or change its rate or cost."""
    engine = RehabEngine(store, update.state)
    try:
        found = engine.set_item_field(item_id, update.field, update.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not found:
        raise HTTPException(status_code=404, detail="Line item not found")

    return engine_response(engine)
