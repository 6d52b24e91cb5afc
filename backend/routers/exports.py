from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..calculations import current_name, load_current
from ..database import get_db
from ..errors import EmptyCalculationError
from ..exporters import export_filename, tubes_to_csv
from ..pdf_generator import generate_calculation_pdf
from ..settings_service import load_settings
from ..store import KeyValueStore

router = APIRouter(prefix="/exports", tags=["exports"])


@router.get("/csv")
def export_csv(db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    try:
        content = tubes_to_csv(tubes, app_settings.price_per_kg)
    except EmptyCalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("csv")}"'},
    )


@router.get("/pdf")
def export_pdf(db: Session = Depends(get_db)):
    store = KeyValueStore(db)
    tubes = load_current(store)
    app_settings = load_settings(store)
    try:
        pdf_bytes = generate_calculation_pdf(
            tubes,
            app_settings.price_per_kg,
            calculation_name=current_name(store),
            material=app_settings.material,
        )
    except EmptyCalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("pdf")}"'},
    )
