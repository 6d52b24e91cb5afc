from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from datetime import datetime
from .database import Base
import enum


class UnitSystem(str, enum.Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class WeightUnit(str, enum.Enum):
    KG = "kg"
    LB = "lb"


class AppState(Base):
    """Keyed JSON blobs: settings, the autosaved working list."""
    __tablename__ = "app_state"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SavedCalculation(Base):
    """A named snapshot of a tube list with the price and material it was made with."""
    __tablename__ = "saved_calculations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    tubes = Column(JSON, default=list)  # list of TubeLineItem dicts
    price_per_kg = Column(Float, nullable=False)
    material = Column(String, nullable=True)  # NULL on rows saved before materials existed
    created_at = Column(DateTime, default=datetime.utcnow)


class CustomMaterial(Base):
    """User-defined material, merged over the built-in density table."""
    __tablename__ = "custom_materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    density = Column(Float, nullable=False)  # g/cm³
    created_at = Column(DateTime, default=datetime.utcnow)


class SavedPipeCalculation(Base):
    """A named snapshot of the MS pipe list."""
    __tablename__ = "saved_pipe_calculations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    pipes = Column(JSON, default=list)  # list of MSPipeItem dicts
    price_per_kg = Column(Float, nullable=False)
    material = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
