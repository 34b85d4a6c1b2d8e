from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
import logging
import uvicorn
import os
from contextlib import asynccontextmanager

from infrastructure.database.database import create_tables

# Import routers
from routers.labeling_router import router as labeling_router
from routers.dependencies import require_api_key
from config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await create_tables()
    logger.info("Labeling tables created/verified.")
    yield
    # Shutdown (if needed)

# Create FastAPI app
docs_url = None if settings.API_AUTH_TOKEN else "/docs"
redoc_url = None if settings.API_AUTH_TOKEN else "/redoc"
openapi_url = None if settings.API_AUTH_TOKEN else "/openapi.json"

app = FastAPI(
    title="Labeling & Opposition Discovery Backend",
    description="API for labeling posts, browsing categories, and pairing opposing posts",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    labeling_router,
    prefix="/api",
    tags=["Labeling"],
    dependencies=[Depends(require_api_key)],
)

if settings.API_AUTH_TOKEN:
    from fastapi.openapi.docs import get_swagger_ui_html
    from fastapi.openapi.utils import get_openapi
    from fastapi.responses import JSONResponse

    @app.get("/openapi.json", include_in_schema=False, dependencies=[Depends(require_api_key)])
    async def protected_openapi():
        return JSONResponse(get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
            description=app.description,
        ))

    @app.get("/docs", include_in_schema=False, dependencies=[Depends(require_api_key)])
    async def protected_swagger():
        return get_swagger_ui_html(openapi_url="/openapi.json", title=f"{app.title} - Docs")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Run app
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
