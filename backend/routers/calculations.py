from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from .. import calculations, schemas
from ..database import get_db
from ..errors import EmptyCalculationError
from ..settings_service import load_settings
from ..store import KeyValueStore

router = APIRouter(prefix="/calculations", tags=["calculations"])


@router.get("/", response_model=List[schemas.SavedCalculation])
def list_calculations(db: Session = Depends(get_db)):
    return calculations.list_calculations(db)


@router.post("/", response_model=schemas.SavedCalculation)
def save_calculation(body: schemas.SavedCalculationCreate, db: Session = Depends(get_db)):
    """Snapshot the working list under a name."""
    store = KeyValueStore(db)
    tubes = calculations.load_current(store)
    app_settings = load_settings(store)
    try:
        saved = calculations.save_calculation(db, tubes, app_settings, body.name)
    except EmptyCalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    # Working list now carries the saved name
    calculations.save_current(store, tubes, app_settings, name=saved["name"])
    return saved


@router.get("/{calc_id}", response_model=schemas.SavedCalculation)
def get_calculation(calc_id: int, db: Session = Depends(get_db)):
    calc = calculations.get_calculation(db, calc_id)
    if not calc:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return calc


@router.post("/{calc_id}/load", response_model=schemas.SavedCalculation)
def load_calculation(calc_id: int, db: Session = Depends(get_db)):
    """Replace the working list, price and material with a saved calculation."""
    calc = calculations.load_calculation(db, KeyValueStore(db), calc_id)
    if not calc:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return calc


@router.delete("/{calc_id}")
def delete_calculation(calc_id: int, db: Session = Depends(get_db)):
    if not calculations.delete_calculation(db, calc_id):
        raise HTTPException(status_code=404, detail="Calculation not found")
    return {"ok": True}


@router.delete("/")
def clear_calculations(db: Session = Depends(get_db)):
    return {"ok": True, "removed": calculations.clear_calculations(db)}
