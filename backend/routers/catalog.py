from fastapi import APIRouter

from ..schemas import SHEET_THICKNESSES, TUBE_THICKNESSES
from ..standard_weights import catalog_entries
from ..weights import MATERIAL_DENSITIES, SHAPES

router = APIRouter(prefix="/catalog", tags=["catalog"])

# Sizes offered in the form's dropdowns (inches); any in-range custom size is accepted
STANDARD_SIZES = {
    "round": ["0.5", "0.75", "1.0", "1.25", "1.5", "2.0", "2.5", "3.0"],
    "square": ["0.5", "0.75", "1.0", "1.25", "1.5", "2.0", "2.5", "3.0"],
    "rectangular": {
        "width": ["0.5", "0.75", "1.0", "1.25", "1.5", "2.0"],
        "height": ["0.5", "0.75", "1.0", "1.25", "1.5", "2.0"],
    },
    "sheet": {
        "width": ["12", "24", "36", "48", "60", "72"],
        "length": ["12", "24", "36", "48", "60", "72", "96", "120"],
    },
}


@router.get("/")
def get_catalog():
    return {
        "shapes": list(SHAPES),
        "standard_sizes": STANDARD_SIZES,
        "thickness_options": {
            "tube": list(TUBE_THICKNESSES),
            "sheet": list(SHEET_THICKNESSES),
        },
        "materials": MATERIAL_DENSITIES,
    }


@router.get("/standard-weights/{shape}")
def standard_weights(shape: str):
    """Catalog weights (kg per 20 ft) for round or square pipe."""
    return catalog_entries(shape)
