from fastapi import APIRouter

from app.api.modules.v1.auth.routes.auth_routes import router as auth_router
from app.api.modules.v1.dashboard.routes.dashboard_routes import router as dashboard_router
from app.api.modules.v1.projects.routes.project_routes import router as project_router
from app.api.modules.v1.users.routes.profile_routes import router as profile_router
from app.api.modules.v1.work_items.routes.work_item_routes import router as work_item_router

router = APIRouter(prefix="/v1")
router.include_router(auth_router)
router.include_router(profile_router)
router.include_router(project_router)
router.include_router(work_item_router)
router.include_router(dashboard_router)
