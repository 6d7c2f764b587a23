from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from contextlib import asynccontextmanager

from .core import errors
from .core.config import configure_logging
from .db.database import create_db_and_tables
from .routers.brands import router as brands_router
from .routers.dashboard import router as dashboard_router
from .routers.material_types import router as material_types_router
from .routers.units import router as units_router
from .routers.usage import router as usage_router

ERROR_STATUS = {
    errors.NotFoundError: status.HTTP_404_NOT_FOUND,
    errors.ValidationError: status.HTTP_400_BAD_REQUEST,
    errors.DuplicateError: status.HTTP_409_CONFLICT,
    errors.ReferencedEntityError: status.HTTP_409_CONFLICT,
    errors.InvalidTransitionError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await create_db_and_tables()
    yield


app = FastAPI(
    title="Filastock API",
    description="API for tracking filament spool inventory",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(errors.InventoryError)
async def inventory_error_handler(request: Request, exc: errors.InventoryError):
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=code, content={"detail": exc.message})


# Catalog routes
app.include_router(brands_router, prefix="/brands", tags=["brands"])
app.include_router(material_types_router, prefix="/material-types", tags=["material-types"])

# Inventory routes
app.include_router(units_router, prefix="/units", tags=["units"])
app.include_router(usage_router, prefix="/usage", tags=["usage"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])

if __name__ == "__main__":
    uvicorn.run("filastock.main:app", host="0.0.0.0", port=8000, reload=True)
