"""API route package; imports all routers for main.py."""

from quizdesk.api.health import router as health_router  # noqa: F401
from quizdesk.api.users import router as users_router  # noqa: F401
from quizdesk.api.quizzes import router as quizzes_router  # noqa: F401
from quizdesk.api.attempts import router as attempts_router  # noqa: F401
from quizdesk.api.reports import router as reports_router  # noqa: F401
