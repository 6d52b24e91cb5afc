from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from .. import schemas
from ..calculations import current_name, load_current, save_current
from ..database import get_db
from ..errors import CalculationError, LineItemNotFound
from ..settings_service import density_table, load_settings
from ..store import KeyValueStore
from ..tube_list import TubeList, line_item_view
from ..units import to_display_weight
from ..weights import compute_weight, describe, is_standard_catalog_match, resolve_density

router = APIRouter(prefix="/tubes", tags=["tubes"])

CALCULATION_ERROR_DETAIL = "Unable to calculate weight with the given parameters."


def _list_response(tubes: TubeList, app_settings: schemas.AppSettings, items=None) -> dict:
    items = tubes.items if items is None else items
    return {
        "tubes": [line_item_view(item, app_settings.price_per_kg) for item in items],
        "total_weight": round(tubes.total_weight(), 2),
        "total_price": round(tubes.total_price(app_settings.price_per_kg), 2),
        "price_per_kg": app_settings.price_per_kg,
        "material": app_settings.material,
    }


def _density(db: Session, app_settings: schemas.AppSettings) -> float:
    return resolve_density(app_settings.material, density_table(db))


@router.post("/preview", response_model=schemas.WeightPreview)
def preview_weight(tube: schemas.TubeCreate, db: Session = Depends(get_db)):
    """Compute weight and price for a spec without adding it to the list."""
    app_settings = load_settings(KeyValueStore(db))
    density = _density(db, app_settings)
    try:
        weight = round(compute_weight(tube.spec, density), 2)
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)
    total = weight * tube.quantity
    return {
        "weight_per_tube": weight,
        "total_weight": round(total, 2),
        "price": round(total * app_settings.price_per_kg, 2),
        "label": describe(tube.spec),
        "uses_standard_weight": is_standard_catalog_match(tube.spec),
        "material": app_settings.material,
        "density": density,
    }


@router.get("/", response_model=schemas.TubeListOut)
def list_tubes(q: Optional[str] = None, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    items = tubes.search(q) if q else None
    return _list_response(tubes, app_settings, items)


@router.get("/summary")
def summary(db: Session = Depends(get_db)):
    """Totals in the user's display unit."""
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    total_weight = tubes.total_weight()
    return {
        "name": current_name(store),
        "count": len(tubes),
        "total_weight": to_display_weight(total_weight, app_settings.weight_unit),
        "weight_unit": app_settings.weight_unit,
        "price_per_kg": app_settings.price_per_kg,
        "total_price": round(tubes.total_price(app_settings.price_per_kg), 2),
        "material": app_settings.material,
    }


@router.post("/", response_model=schemas.TubeLineItemOut)
def add_tube(tube: schemas.TubeCreate, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    try:
        item = tubes.add(tube.spec, tube.quantity, _density(db, app_settings))
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)
    save_current(store, tubes, app_settings)
    return line_item_view(item, app_settings.price_per_kg)


@router.put("/{item_id}", response_model=schemas.TubeLineItemOut)
def update_tube(item_id: str, tube: schemas.TubeCreate, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    try:
        item = tubes.update(item_id, tube.spec, tube.quantity, _density(db, app_settings))
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Tube not found")
    except CalculationError:
        raise HTTPException(status_code=422, detail=CALCULATION_ERROR_DETAIL)
    save_current(store, tubes, app_settings)
    return line_item_view(item, app_settings.price_per_kg)


@router.post("/{item_id}/duplicate", response_model=schemas.TubeLineItemOut)
def duplicate_tube(item_id: str, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    try:
        item = tubes.duplicate(item_id)
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Tube not found")
    save_current(store, tubes, app_settings)
    return line_item_view(item, app_settings.price_per_kg)


@router.delete("/{item_id}")
def remove_tube(item_id: str, db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    try:
        tubes.remove(item_id)
    except LineItemNotFound:
        raise HTTPException(status_code=404, detail="Tube not found")
    save_current(store, tubes, load_settings(store))
    return {"ok": True}


@router.delete("/")
def clear_tubes(db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    removed = tubes.clear()
    save_current(store, tubes, load_settings(store))
    return {"ok": True, "removed": removed}
