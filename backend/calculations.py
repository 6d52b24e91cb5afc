"""
Working calculation and saved calculations.

The working list is autosaved to the keyed store under
`current_calculation` after every change. Named calculations are snapshots
in the saved_calculations table.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import models
from .errors import EmptyCalculationError
from .schemas import AppSettings
from .settings_service import load_settings, save_settings
from .store import KeyValueStore, CURRENT_CALCULATION_KEY
from .tube_list import TubeList
from .weights import DEFAULT_MATERIAL

logger = logging.getLogger(__name__)


def default_calculation_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Calculation {now.strftime('%Y-%m-%d %H:%M:%S')}"


# --- Working list ---

def load_current(store: KeyValueStore) -> TubeList:
    raw = store.get(CURRENT_CALCULATION_KEY) or {}
    try:
        return TubeList.from_json(raw.get("tubes", []))
    except (ValidationError, AttributeError, TypeError) as e:
        logger.warning(f"Discarding unreadable working calculation: {e}")
        return TubeList()


def current_name(store: KeyValueStore) -> str:
    raw = store.get(CURRENT_CALCULATION_KEY) or {}
    return raw.get("name") or ""


def save_current(store: KeyValueStore, tubes: TubeList, app_settings: AppSettings, name: Optional[str] = None) -> None:
    """Autosave the working list together with the price/material it was priced at."""
    if name is None:
        name = current_name(store)
    store.put(CURRENT_CALCULATION_KEY, {
        "name": name,
        "tubes": tubes.to_json(),
        "price_per_kg": app_settings.price_per_kg,
        "material": app_settings.material,
        "date": datetime.utcnow().isoformat(),
    })


# --- Saved calculations ---

def _to_dict(row: models.SavedCalculation) -> dict:
    """Row -> API dict. Rows saved without a material get stainless steel."""
    return {
        "id": row.id,
        "name": row.name,
        "tubes": row.tubes or [],
        "price_per_kg": row.price_per_kg,
        "material": row.material or DEFAULT_MATERIAL,
        "created_at": row.created_at,
    }


def save_calculation(db: Session, tubes: TubeList, app_settings: AppSettings, name: Optional[str] = None) -> dict:
    if len(tubes) == 0:
        raise EmptyCalculationError("Add some tubes before saving the calculation.")
    name = (name or "").strip() or default_calculation_name()
    row = models.SavedCalculation(
        name=name,
        tubes=tubes.to_json(),
        price_per_kg=app_settings.price_per_kg,
        material=app_settings.material,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Saved calculation %r (%d tubes)", name, len(tubes))
    return _to_dict(row)


def list_calculations(db: Session) -> List[dict]:
    rows = db.query(models.SavedCalculation).order_by(models.SavedCalculation.created_at, models.SavedCalculation.id).all()
    return [_to_dict(r) for r in rows]


def get_calculation(db: Session, calc_id: int) -> Optional[dict]:
    row = db.query(models.SavedCalculation).filter(models.SavedCalculation.id == calc_id).first()
    return _to_dict(row) if row else None


def delete_calculation(db: Session, calc_id: int) -> bool:
    deleted = db.query(models.SavedCalculation).filter(models.SavedCalculation.id == calc_id).delete()
    db.commit()
    return bool(deleted)


def clear_calculations(db: Session) -> int:
    deleted = db.query(models.SavedCalculation).delete()
    db.commit()
    return deleted


def load_calculation(db: Session, store: KeyValueStore, calc_id: int) -> Optional[dict]:
    """
    Replace the working list, price and material with a saved calculation.
    Returns the saved calculation, or None if it doesn't exist.
    """
    calc = get_calculation(db, calc_id)
    if calc is None:
        return None
    tubes = TubeList.from_json(calc["tubes"])
    app_settings = load_settings(store).model_copy(update={
        "price_per_kg": calc["price_per_kg"],
        "material": calc["material"],
    })
    save_settings(store, app_settings)
    save_current(store, tubes, app_settings, name=calc["name"])
    logger.info("Loaded calculation %r", calc["name"])
    return calc
