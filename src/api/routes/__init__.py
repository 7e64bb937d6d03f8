"""API route exports."""

from api.routes.analyses import router as analyses_router
from api.routes.health import router as health_router
from api.routes.leads import router as leads_router
from api.routes.users import router as users_router

__all__ = ["analyses_router", "health_router", "leads_router", "users_router"]
