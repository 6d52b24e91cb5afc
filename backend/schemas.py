from pydantic import BaseModel, Field, field_validator
from typing import Annotated, Optional, List, Literal, Union
from datetime import datetime
from .models import UnitSystem, WeightUnit
from .ms_pipe import WALL_THICKNESSES as MS_WALL_THICKNESSES

# Thickness options offered per shape (mm). The engine itself accepts any
# positive wall; these are enforced here, at the API boundary.
TUBE_THICKNESSES = (1.0, 1.2, 1.5, 2.0, 3.0)
SHEET_THICKNESSES = (0.5, 0.8, 1.0, 1.5, 2.0, 3.0, 4.0, 5.0, 6.0)

MAX_LENGTH_INCHES = 10000


def _check_thickness(value: float, allowed: tuple) -> float:
    if round(value, 2) not in allowed:
        options = ", ".join(f"{t:g}" for t in allowed)
        raise ValueError(f"thickness must be one of {options} mm")
    return value


# --- Tube specs (tagged on `shape`) ---

class RoundSpec(BaseModel):
    shape: Literal["round"] = "round"
    size: float = Field(..., ge=0.1, le=20, description="Outer diameter, inches")
    thickness: float = Field(..., gt=0, description="Wall thickness, mm")
    length: float = Field(..., gt=0, le=MAX_LENGTH_INCHES, description="Inches")

    @field_validator("thickness")
    @classmethod
    def thickness_in_catalog(cls, v):
        return _check_thickness(v, TUBE_THICKNESSES)


class SquareSpec(BaseModel):
    shape: Literal["square"] = "square"
    size: float = Field(..., ge=0.1, le=20, description="Side length, inches")
    thickness: float = Field(..., gt=0, description="Wall thickness, mm")
    length: float = Field(..., gt=0, le=MAX_LENGTH_INCHES, description="Inches")

    @field_validator("thickness")
    @classmethod
    def thickness_in_catalog(cls, v):
        return _check_thickness(v, TUBE_THICKNESSES)


class RectangularSpec(BaseModel):
    shape: Literal["rectangular"] = "rectangular"
    width: float = Field(..., ge=0.1, le=20, description="Inches")
    height: float = Field(..., ge=0.1, le=20, description="Inches")
    thickness: float = Field(..., gt=0, description="Wall thickness, mm")
    length: float = Field(..., gt=0, le=MAX_LENGTH_INCHES, description="Inches")

    @field_validator("thickness")
    @classmethod
    def thickness_in_catalog(cls, v):
        return _check_thickness(v, TUBE_THICKNESSES)


class SheetSpec(BaseModel):
    shape: Literal["sheet"] = "sheet"
    width: float = Field(..., ge=1, le=120, description="Inches")
    length: float = Field(..., gt=0, le=MAX_LENGTH_INCHES, description="Inches")
    thickness: float = Field(..., gt=0, description="Sheet thickness, mm")

    @field_validator("thickness")
    @classmethod
    def thickness_in_catalog(cls, v):
        return _check_thickness(v, SHEET_THICKNESSES)


TubeSpec = Annotated[
    Union[RoundSpec, SquareSpec, RectangularSpec, SheetSpec],
    Field(discriminator="shape"),
]


# --- Line items ---

class TubeCreate(BaseModel):
    spec: TubeSpec
    quantity: float = Field(1, gt=0)


class TubeLineItem(BaseModel):
    id: str
    spec: TubeSpec
    quantity: float = Field(..., gt=0)
    weight_per_tube: float  # kg, 2 decimals


class TubeLineItemOut(TubeLineItem):
    label: str
    uses_standard_weight: bool
    total_weight: float
    price: float


class TubeListOut(BaseModel):
    tubes: List[TubeLineItemOut] = []
    total_weight: float
    total_price: float
    price_per_kg: float
    material: str


class WeightPreview(BaseModel):
    weight_per_tube: float
    total_weight: float
    price: float
    label: str
    uses_standard_weight: bool
    material: str
    density: float


# --- Settings & materials ---

class AppSettings(BaseModel):
    price_per_kg: float = Field(..., ge=0)
    material: str
    unit_system: UnitSystem = UnitSystem.METRIC
    weight_unit: WeightUnit = WeightUnit.KG


class AppSettingsUpdate(BaseModel):
    price_per_kg: Optional[float] = Field(None, ge=0)
    material: Optional[str] = None
    unit_system: Optional[UnitSystem] = None
    weight_unit: Optional[WeightUnit] = None


class CustomMaterialCreate(BaseModel):
    name: str = Field(..., min_length=1)
    density: float = Field(..., gt=0, description="g/cm³")


class CustomMaterial(CustomMaterialCreate):
    id: int
    created_at: datetime
    class Config:
        from_attributes = True


class MaterialOut(BaseModel):
    name: str
    density: float
    builtin: bool


# --- Saved calculations ---

class SavedCalculationCreate(BaseModel):
    name: Optional[str] = None


class SavedCalculation(BaseModel):
    id: int
    name: str
    tubes: List[TubeLineItem] = []
    price_per_kg: float
    material: str
    created_at: datetime
    class Config:
        from_attributes = True


# --- MS pipe chart ---

class MSPipeCreate(BaseModel):
    shape: Literal["round", "square"]
    size: str = Field(..., description='Inch label, e.g. 1 1/4"')
    thickness: float = Field(..., gt=0, description="Wall thickness, mm")
    quantity: int = Field(1, ge=1)
    custom_length_inches: Optional[float] = Field(None, gt=0, le=MAX_LENGTH_INCHES)

    @field_validator("thickness")
    @classmethod
    def thickness_in_chart(cls, v):
        return _check_thickness(v, tuple(MS_WALL_THICKNESSES))


class MSPipeCalculateRequest(MSPipeCreate):
    material: Optional[str] = None
    price_per_kg: Optional[float] = Field(None, ge=0)


class MSPipeResult(BaseModel):
    shape: str
    size: str
    thickness: float
    weight_per_pipe: float
    price_per_pipe: float
    quantity: int
    total_weight: float
    total_price: float
    custom_length_inches: Optional[float] = None


class MSPipeItem(MSPipeCreate):
    id: str
    length_meters: float
    weight_per_pipe: float  # kg, rounded to 3 decimals


class MSPipeItemOut(MSPipeItem):
    label: str
    price_per_pipe: float
    total_weight: float
    price: float


class MSPipeSettings(BaseModel):
    price_per_kg: float = Field(..., ge=0)
    material: str


class MSPipeSettingsUpdate(BaseModel):
    price_per_kg: Optional[float] = Field(None, ge=0)
    material: Optional[str] = None


class MSPipeListOut(BaseModel):
    name: str = ""
    pipes: List[MSPipeItemOut] = []
    total_weight: float
    total_price: float
    price_per_kg: float
    material: str


class SavedPipeCalculation(BaseModel):
    id: int
    name: str
    pipes: List[MSPipeItem] = []
    price_per_kg: float
    material: str
    created_at: datetime
    class Config:
        from_attributes = True
