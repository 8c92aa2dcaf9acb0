from fastapi import APIRouter

from nutriplan.api.allergens import router as allergens_router
from nutriplan.api.health import router as health_router
from nutriplan.api.ingredients import router as ingredients_router
from nutriplan.api.menus import router as menus_router
from nutriplan.api.user_allergens import router as user_allergens_router

knowledge_router = APIRouter(prefix="/ai")
knowledge_router.include_router(ingredients_router)
knowledge_router.include_router(allergens_router)
knowledge_router.include_router(menus_router)

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(user_allergens_router)
router.include_router(knowledge_router)
