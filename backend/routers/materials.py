import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from .. import pipe_calculations, schemas, settings_service
from ..calculations import load_current, save_current
from ..database import get_db
from ..errors import CalculationError, InvalidMaterialError
from ..store import KeyValueStore
from ..weights import resolve_density

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/materials", tags=["materials"])


def _recalculate_lists_using(db: Session, name: str, density: float):
    """
    Recompute the tube and MS pipe lists whose selected material is `name`.
    Returns a callback that saves them; nothing is written if any item fails.
    """
    store = KeyValueStore(db)
    app_settings = settings_service.load_settings(store)
    pipe_settings = pipe_calculations.load_pipe_settings(store)
    tubes = pipes = None
    try:
        if app_settings.material == name:
            tubes = load_current(store)
            tubes.recalculate(density)
        if pipe_settings.material == name:
            pipes = pipe_calculations.load_pipes(store)
            pipes.recalculate(density)
    except CalculationError:
        raise HTTPException(status_code=422, detail=f"Unable to recalculate the list for material {name!r}.")

    def save():
        if tubes is not None:
            save_current(store, tubes, app_settings)
        if pipes is not None:
            pipe_calculations.save_pipe_state(store, pipes, pipe_settings)
        if tubes is not None or pipes is not None:
            logger.info("Material %s is now %s g/cm³, recalculated the lists using it", name, density)

    return save


@router.get("/", response_model=List[schemas.MaterialOut])
def list_materials(db: Session = Depends(get_db)):
    """Built-in and custom materials with densities (g/cm³)."""
    return settings_service.list_materials(db)


@router.post("/", response_model=schemas.CustomMaterial)
def add_material(material: schemas.CustomMaterialCreate, db: Session = Depends(get_db)):
    name = material.name.strip()
    try:
        # Validate before touching the lists
        settings_service.validate_custom_material(name, material.density)
    except InvalidMaterialError as e:
        raise HTTPException(status_code=422, detail=str(e))
    save_lists = _recalculate_lists_using(db, name, material.density)
    created = settings_service.add_custom_material(db, name, material.density)
    save_lists()
    return created


@router.delete("/{name}")
def delete_material(name: str, db: Session = Depends(get_db)):
    if not settings_service.get_custom_material(db, name):
        raise HTTPException(status_code=404, detail="Custom material not found")
    # Without the custom entry the name falls back to its built-in density, or 7.85
    save_lists = _recalculate_lists_using(db, name, resolve_density(name))
    settings_service.delete_custom_material(db, name)
    save_lists()
    return {"ok": True}
