import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import pipe_calculations, schemas
from ..database import get_db
from ..errors import CalculationError, EmptyCalculationError, LineItemNotFound
from ..exporters import ms_pipe_chart_to_csv
from ..ms_pipe import PIPE_SIZES, WALL_THICKNESSES, calculate_pipe, price_chart, weight_chart
from ..pipe_list import PipeList, pipe_item_view
from ..settings_service import density_for
from ..store import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ms-pipe", tags=["ms-pipe"])

SHAPE_PATTERN = "^(round|square)$"
CALCULATION_ERROR_DETAIL = "Unable to calculate weight with the given parameters."


def _material_and_price(db: Session, material=None, price_per_kg=None):
    pipe_settings = pipe_calculations.load_pipe_settings(KeyValueStore(db))
    material = material or pipe_settings.material
    price = pipe_settings.price_per_kg if price_per_kg is None else price_per_kg
    return material, density_for(db, material), price


def _check_size(shape: str, size: str) -> None:
    if size not in PIPE_SIZES[shape]:
        raise HTTPException(status_code=404, detail=f"No {shape} MS pipe of size {size}")


def _list_response(store: KeyValueStore, pipes: PipeList, pipe_settings: schemas.MSPipeSettings, items=None) -> dict:
    items = pipes.items if items is None else items
    return {
        "name": pipe_calculations.pipe_calculation_name(store),
        "pipes": [pipe_item_view(item, pipe_settings.price_per_kg) for item in items],
        "total_weight": round(pipes.total_weight(), 3),
        "total_price": round(pipes.total_price(pipe_settings.price_per_kg), 2),
        "price_per_kg": pipe_settings.price_per_kg,
        "material": pipe_settings.material,
    }


# --- Chart ---

@router.get("/chart")
def chart(
    shape: str = Query("round", pattern=SHAPE_PATTERN),
    material: str = None,
    price_per_kg: float = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    """Weight and price per 6 m pipe for every size and wall."""
    material, density, price = _material_and_price(db, material, price_per_kg)
    return {
        "shape": shape,
        "material": material,
        "price_per_kg": price,
        "wall_thicknesses": WALL_THICKNESSES,
        "weights": weight_chart(shape, density),
        "prices": price_chart(shape, price, density),
    }


@router.get("/chart.csv")
def chart_csv(
    shape: str = Query("round", pattern=SHAPE_PATTERN),
    material: str = None,
    price_per_kg: float = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    _, density, price = _material_and_price(db, material, price_per_kg)
    return Response(
        content=ms_pipe_chart_to_csv(shape, price, density),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="ms-{shape}-pipe-data.csv"'},
    )


@router.post("/calculate", response_model=schemas.MSPipeResult)
def calculate(req: schemas.MSPipeCalculateRequest, db: Session = Depends(get_db)):
    _check_size(req.shape, req.size)
    _, density, price = _material_and_price(db, req.material, req.price_per_kg)
    try:
        return calculate_pipe(
            req.shape,
            req.size,
            req.thickness,
            price,
            quantity=req.quantity,
            custom_length_inches=req.custom_length_inches,
            density=density,
        )
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)


# --- Settings (rate and material of the MS calculator) ---

@router.get("/settings", response_model=schemas.MSPipeSettings)
def get_pipe_settings(db: Session = Depends(get_db)):
    return pipe_calculations.load_pipe_settings(KeyValueStore(db))


@router.patch("/settings", response_model=schemas.MSPipeSettings)
def update_pipe_settings(update: schemas.MSPipeSettingsUpdate, db: Session = Depends(get_db)):
    """A material change recomputes the MS list; on failure nothing changes."""
    store = KeyValueStore(db)
    current = pipe_calculations.load_pipe_settings(store)
    updated = pipe_calculations.apply_pipe_settings_update(current, update)
    pipes = pipe_calculations.load_pipes(store)
    if updated.material != current.material and len(pipes):
        try:
            pipes.recalculate(density_for(db, updated.material))
        except CalculationError:
            raise HTTPException(status_code=422, detail="Unable to recalculate pipes for the new material.")
        logger.info("MS material changed %s -> %s, recalculated %d pipes", current.material, updated.material, len(pipes))
    pipe_calculations.save_pipe_state(store, pipes, updated)
    return updated


# --- Pipe list ---

@router.get("/pipes", response_model=schemas.MSPipeListOut)
def list_pipes(q: Optional[str] = None, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    items = pipes.search(q) if q else None
    return _list_response(store, pipes, pipe_calculations.load_pipe_settings(store), items)


@router.post("/pipes", response_model=schemas.MSPipeItemOut)
def add_pipe(pipe: schemas.MSPipeCreate, db: Session = Depends(get_db)):
    _check_size(pipe.shape, pipe.size)
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    pipe_settings = pipe_calculations.load_pipe_settings(store)
    try:
        item = pipes.add(pipe, density_for(db, pipe_settings.material))
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)
    pipe_calculations.save_pipe_state(store, pipes, pipe_settings)
    return pipe_item_view(item, pipe_settings.price_per_kg)


@router.put("/pipes/{item_id}", response_model=schemas.MSPipeItemOut)
def update_pipe(item_id: str, pipe: schemas.MSPipeCreate, db: Session = Depends(get_db)):
    _check_size(pipe.shape, pipe.size)
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    pipe_settings = pipe_calculations.load_pipe_settings(store)
    try:
        item = pipes.update(item_id, pipe, density_for(db, pipe_settings.material))
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Pipe not found")
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)
    pipe_calculations.save_pipe_state(store, pipes, pipe_settings)
    return pipe_item_view(item, pipe_settings.price_per_kg)


@router.post("/pipes/{item_id}/duplicate", response_model=schemas.MSPipeItemOut)
def duplicate_pipe(item_id: str, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    pipe_settings = pipe_calculations.load_pipe_settings(store)
    try:
        item = pipes.duplicate(item_id)
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Pipe not found")
    pipe_calculations.save_pipe_state(store, pipes, pipe_settings)
    return pipe_item_view(item, pipe_settings.price_per_kg)


@router.delete("/pipes/{item_id}")
def remove_pipe(item_id: str, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    try:
        pipes.remove(item_id)
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Pipe not found")
    pipe_calculations.save_pipe_state(store, pipes, pipe_calculations.load_pipe_settings(store))
    return {"ok": True}


@router.delete("/pipes")
def clear_pipes(db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    removed = pipes.clear()
    pipe_calculations.save_pipe_state(store, pipes, pipe_calculations.load_pipe_settings(store))
    return {"ok": True, "removed": removed}


# --- Saved MS calculations ---

@router.get("/calculations", response_model=List[schemas.SavedPipeCalculation])
def list_pipe_calculations(db: Session = Depends(get_db)):
    return pipe_calculations.list_pipe_calculations(db)


@router.post("/calculations", response_model=schemas.SavedPipeCalculation)
def save_pipe_calculation(body: schemas.SavedCalculationCreate, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    pipes = pipe_calculations.load_pipes(store)
    pipe_settings = pipe_calculations.load_pipe_settings(store)
    try:
        saved = pipe_calculations.save_pipe_calculation(db, pipes, pipe_settings, body.name)
    except EmptyCalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    pipe_calculations.save_pipe_state(store, pipes, pipe_settings, name=saved["name"])
    return saved


@router.get("/calculations/{calc_id}", response_model=schemas.SavedPipeCalculation)
def get_pipe_calculation(calc_id: int, db: Session = Depends(get_db)):
    calc = pipe_calculations.get_pipe_calculation(db, calc_id)
    if not calc:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return calc


@router.post("/calculations/{calc_id}/load", response_model=schemas.SavedPipeCalculation)
def load_pipe_calculation(calc_id: int, db: Session = Depends(get_db)):
    calc = pipe_calculations.load_pipe_calculation(db, KeyValueStore(db), calc_id)
    if not calc:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return calc


@router.delete("/calculations/{calc_id}")
def delete_pipe_calculation(calc_id: int, db: Session = Depends(get_db)):
    if not pipe_calculations.delete_pipe_calculation(db, calc_id):
        raise HTTPException(status_code=404, detail="Calculation not found")
    return {"ok": True}


@router.delete("/calculations")
def clear_pipe_calculations(db: Session = Depends(get_db)):
    return {"ok": True, "removed": pipe_calculations.clear_pipe_calculations(db)}
