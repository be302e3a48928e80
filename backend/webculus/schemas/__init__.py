"""Pydantic schemas, re-exported for convenience."""

from webculus.schemas.common import CamelModel, SuccessResponse  # noqa: F401
from webculus.schemas.user import (  # noqa: F401
    SignUp,
    SignIn,
    GoogleAuth,
    UserRead,
    AuthResponse,
)
from webculus.schemas.lesson import LessonRead  # noqa: F401
from webculus.schemas.practice import (  # noqa: F401
    PracticeProblemRead,
    AttemptSubmit,
    AttemptResult,
    PreviousAttempt,
)
from webculus.schemas.progress import (  # noqa: F401
    ProgressStatus,
    ProgressUpdate,
    ProgressRead,
)
from webculus.schemas.dashboard import (  # noqa: F401
    AttemptRecord,
    ProgressRecord,
    LessonRecord,
    DashboardStats,
)
