"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.funnels import router as funnels_router
from api.v1.routes.funnels import workspace_funnels_router
from api.v1.routes.users import router as users_router
from api.v1.routes.workspaces import router as workspaces_router

router = APIRouter()
router.include_router(workspaces_router)
router.include_router(workspace_funnels_router)
router.include_router(funnels_router)
router.include_router(users_router)
