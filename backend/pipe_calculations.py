"""
MS pipe calculator state and saved MS calculations.

The MS calculator is independent of the tube calculator: its list, price
per kg and material are autosaved together under `ms_pipe_calculation`, and
named snapshots go to the saved_pipe_calculations table.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import models
from .calculations import default_calculation_name
from .config import settings as config
from .errors import EmptyCalculationError
from .pipe_list import PipeList
from .schemas import MSPipeSettings, MSPipeSettingsUpdate
from .store import KeyValueStore, PIPE_CALCULATION_KEY

logger = logging.getLogger(__name__)


def default_pipe_settings() -> MSPipeSettings:
    return MSPipeSettings(price_per_kg=config.MS_DEFAULT_PRICE_PER_KG, material=config.MS_DEFAULT_MATERIAL)


def _raw(store: KeyValueStore) -> dict:
    raw = store.get(PIPE_CALCULATION_KEY)
    return raw if isinstance(raw, dict) else {}


def load_pipe_settings(store: KeyValueStore) -> MSPipeSettings:
    raw = _raw(store)
    defaults = default_pipe_settings()
    try:
        return MSPipeSettings(
            price_per_kg=raw.get("price_per_kg", defaults.price_per_kg),
            material=raw.get("material") or defaults.material,
        )
    except ValidationError as e:
        logger.warning(f"Ignoring unreadable MS pipe settings: {e}")
        return defaults


def apply_pipe_settings_update(current: MSPipeSettings, update: MSPipeSettingsUpdate) -> MSPipeSettings:
    return current.model_copy(update=update.model_dump(exclude_unset=True, exclude_none=True))


def load_pipes(store: KeyValueStore) -> PipeList:
    try:
        return PipeList.from_json(_raw(store).get("pipes", []))
    except (ValidationError, TypeError) as e:
        logger.warning(f"Discarding unreadable MS pipe list: {e}")
        return PipeList()


def pipe_calculation_name(store: KeyValueStore) -> str:
    return _raw(store).get("name") or ""


def save_pipe_state(store: KeyValueStore, pipes: PipeList, pipe_settings: MSPipeSettings,
                    name: Optional[str] = None) -> None:
    if name is None:
        name = pipe_calculation_name(store)
    store.put(PIPE_CALCULATION_KEY, {
        "name": name,
        "pipes": pipes.to_json(),
        "price_per_kg": pipe_settings.price_per_kg,
        "material": pipe_settings.material,
        "date": datetime.utcnow().isoformat(),
    })


# --- Saved MS calculations ---

def _to_dict(row: models.SavedPipeCalculation) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "pipes": row.pipes or [],
        "price_per_kg": row.price_per_kg,
        "material": row.material or config.MS_DEFAULT_MATERIAL,
        "created_at": row.created_at,
    }


def save_pipe_calculation(db: Session, pipes: PipeList, pipe_settings: MSPipeSettings,
                          name: Optional[str] = None) -> dict:
    if len(pipes) == 0:
        raise EmptyCalculationError("Add some pipes before saving the calculation.")
    name = (name or "").strip() or default_calculation_name()
    row = models.SavedPipeCalculation(
        name=name,
        pipes=pipes.to_json(),
        price_per_kg=pipe_settings.price_per_kg,
        material=pipe_settings.material,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Saved MS pipe calculation %r (%d pipes)", name, len(pipes))
    return _to_dict(row)


def list_pipe_calculations(db: Session) -> List[dict]:
    rows = (
        db.query(models.SavedPipeCalculation)
        .order_by(models.SavedPipeCalculation.created_at, models.SavedPipeCalculation.id)
        .all()
    )
    return [_to_dict(r) for r in rows]


def get_pipe_calculation(db: Session, calc_id: int) -> Optional[dict]:
    row = db.query(models.SavedPipeCalculation).filter(models.SavedPipeCalculation.id == calc_id).first()
    return _to_dict(row) if row else None


def delete_pipe_calculation(db: Session, calc_id: int) -> bool:
    deleted = db.query(models.SavedPipeCalculation).filter(models.SavedPipeCalculation.id == calc_id).delete()
    db.commit()
    return bool(deleted)


def clear_pipe_calculations(db: Session) -> int:
    deleted = db.query(models.SavedPipeCalculation).delete()
    db.commit()
    return deleted


def load_pipe_calculation(db: Session, store: KeyValueStore, calc_id: int) -> Optional[dict]:
    """Replace the MS list, price and material with a saved calculation."""
    calc = get_pipe_calculation(db, calc_id)
    if calc is None:
        return None
    pipe_settings = MSPipeSettings(price_per_kg=calc["price_per_kg"], material=calc["material"])
    save_pipe_state(store, PipeList.from_json(calc["pipes"]), pipe_settings, name=calc["name"])
    logger.info("Loaded MS pipe calculation %r", calc["name"])
    return calc
