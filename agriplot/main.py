import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from agriplot.config import settings
from agriplot.modules.plots import router as plots_router
from agriplot.modules.offline import router as offline_router
from agriplot.modules.upstream.client import close_upstream_client

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_upstream_client()

app = FastAPI(title=f"{settings.PROJECT_NAME} API", version=settings.PROJECT_VERSION, lifespan=lifespan)

# Register Modules
app.include_router(plots_router.router)
app.include_router(offline_router.router)

@app.get("/")
def root():
    return {"message": "System is Online. Use /docs for Swagger UI"}
