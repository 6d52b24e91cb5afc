import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas, settings_service
from ..calculations import load_current, save_current
from ..database import get_db
from ..errors import CalculationError
from ..store import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=schemas.AppSettings)
def get_settings(db: Session = Depends(get_db)):
    return settings_service.load_settings(KeyValueStore(db))


@router.patch("/", response_model=schemas.AppSettings)
def update_settings(update: schemas.AppSettingsUpdate, db: Session = Depends(get_db)):
    """
    Partial update. A material change recomputes the working list with the
    new density; if any tube can't be recomputed the change is rejected.
    """
    store = KeyValueStore(db)
    current = settings_service.load_settings(store)
    updated = settings_service.apply_update(current, update)

    tubes = load_current(store)
    if updated.material != current.material and len(tubes):
        density = settings_service.density_for(db, updated.material)
        try:
            tubes.recalculate(density)
        except CalculationError:
            raise HTTPException(status_code=422, detail="Unable to recalculate tubes for the new material.")
        logger.info("Material changed %s -> %s, recalculated %d tubes", current.material, updated.material, len(tubes))

    settings_service.save_settings(store, updated)
    save_current(store, tubes, updated)
    return updated
