"""
Application settings and material table.

Settings are an explicit AppSettings object read from and written to the
keyed store; nothing here is module-level mutable state. The weight engine
receives the density table built from these, never the store itself.
"""

import logging
from typing import List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import models
from .config import settings as config
from .schemas import AppSettings, AppSettingsUpdate, MaterialOut
from .store import KeyValueStore, SETTINGS_KEY
from .weights import MATERIAL_DENSITIES, build_density_table, resolve_density

logger = logging.getLogger(__name__)


def default_settings() -> AppSettings:
    return AppSettings(
        price_per_kg=config.DEFAULT_PRICE_PER_KG,
        material=config.DEFAULT_MATERIAL,
        unit_system=config.DEFAULT_UNIT_SYSTEM,
        weight_unit=config.DEFAULT_WEIGHT_UNIT,
    )


def load_settings(store: KeyValueStore) -> AppSettings:
    """Stored settings, or defaults when absent or unreadable."""
    raw = store.get(SETTINGS_KEY)
    if raw is None:
        return default_settings()
    try:
        return AppSettings.model_validate({**default_settings().model_dump(), **raw})
    except (ValidationError, TypeError) as e:
        logger.warning(f"Ignoring unreadable stored settings: {e}")
        return default_settings()


def save_settings(store: KeyValueStore, app_settings: AppSettings) -> AppSettings:
    store.put(SETTINGS_KEY, app_settings.model_dump(mode="json"))
    return app_settings


def apply_update(current: AppSettings, update: AppSettingsUpdate) -> AppSettings:
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    return current.model_copy(update=changes)


# --- Materials ---

def list_custom_materials(db: Session) -> List[models.CustomMaterial]:
    return db.query(models.CustomMaterial).order_by(models.CustomMaterial.name).all()


def density_table(db: Session) -> dict:
    """Built-in densities merged with the user's custom materials."""
    return build_density_table(list_custom_materials(db))


def density_for(db: Session, material_id: str) -> float:
    return resolve_density(material_id, density_table(db))


def list_materials(db: Session) -> List[MaterialOut]:
    table = density_table(db)
    customs = {m.name for m in list_custom_materials(db)}
    return [
        MaterialOut(name=name, density=density, builtin=name in MATERIAL_DENSITIES and name not in customs)
        for name, density in table.items()
    ]


def validate_custom_material(name: str, density: float) -> None:
    """InvalidMaterialError for an empty name or a density that isn't > 0."""
    # Same rule the density table applies
    build_density_table([{"name": (name or "").strip(), "density": density}])


def get_custom_material(db: Session, name: str):
    return db.query(models.CustomMaterial).filter(models.CustomMaterial.name == name).first()


def add_custom_material(db: Session, name: str, density: float) -> models.CustomMaterial:
    """Create or replace a custom material. Density must be > 0."""
    name = (name or "").strip()
    validate_custom_material(name, density)
    existing = get_custom_material(db, name)
    if existing:
        existing.density = density
        material = existing
    else:
        material = models.CustomMaterial(name=name, density=density)
        db.add(material)
    db.commit()
    db.refresh(material)
    logger.info("Custom material %s = %s g/cm³", name, density)
    return material


def delete_custom_material(db: Session, name: str) -> bool:
    deleted = db.query(models.CustomMaterial).filter(models.CustomMaterial.name == name).delete()
    db.commit()
    return bool(deleted)
