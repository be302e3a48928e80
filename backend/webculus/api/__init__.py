"""API route package: imports all routers for main.py."""

from webculus.api.health import router as health_router  # noqa: F401
from webculus.api.auth import router as auth_router  # noqa: F401
from webculus.api.users import router as users_router  # noqa: F401
from webculus.api.lessons import router as lessons_router  # noqa: F401
from webculus.api.practice import router as practice_router  # noqa: F401
from webculus.api.progress import router as progress_router  # noqa: F401
from webculus.api.dashboard import router as dashboard_router  # noqa: F401
