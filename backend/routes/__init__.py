"""FastAPI API endpoints under /api.

Endpoint groups: settings (health + config), adversaries, environments
(browse with filter/search + custom CRUD), encounters (Battle Point
scoring), import (library import + markdown parse preview).
"""

from fastapi import APIRouter

from .adversaries import router as adversaries_router
from .encounters import router as encounters_router
from .environments import router as environments_router
from .imports import router as imports_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(adversaries_router)
router.include_router(environments_router)
router.include_router(encounters_router)
router.include_router(imports_router)
