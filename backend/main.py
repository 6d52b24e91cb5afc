from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import tubes, calculations, materials, app_settings, exports, ms_pipe, catalog

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("tubecalc")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description="Weight and cost calculator for metal tubes, pipes and sheets",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(tubes.router, prefix="/api")
app.include_router(calculations.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(app_settings.router, prefix="/api")
app.include_router(exports.router, prefix="/api")
app.include_router(ms_pipe.router, prefix="/api")
app.include_router(catalog.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "tubecalc"}


logger.info("%s ready (database: %s)", settings.APP_NAME, settings.DATABASE_URL)
