from __future__ import annotations
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from snapshelf.app.config import settings
from snapshelf.app.errors import install_exception_handlers
from snapshelf.app.routers.analyze import router as analyze_router
from snapshelf.app.routers.recipes import router as recipes_router
from snapshelf.app.routers.suggestions import router as suggestions_router
from snapshelf.app.routers.wines import router as wines_router

# Plain stdout logging (works for dev and containers)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="SnapShelf API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(wines_router)
app.include_router(recipes_router)
app.include_router(analyze_router)
app.include_router(suggestions_router)


@app.get("/health")
def health():
    return {"ok": True}
