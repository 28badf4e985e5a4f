"""Dashboard endpoints (subjects for the selected semester)."""

from fastapi import APIRouter, Depends

from studyvault.core.models import User
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context, require_user
from studyvault.web.schemas import (
    DashboardResponse,
    EmptyState,
    SemesterRequest,
    SubjectResponse,
)

router = APIRouter(tags=["dashboard"])


def _dashboard(ctx: AppContext, user: User) -> DashboardResponse:
    semester = ctx.catalog.selected_semester
    subjects = ctx.catalog.subjects_for_semester(semester)

    empty_state = None
    if not subjects:
        empty_state = EmptyState(
            title=f"No subjects available for Semester {semester}",
            description=(
                "Books for this semester haven't been added yet. "
                "Please check back later."
            ),
        )

    return DashboardResponse(
        greeting=f"Hi {user.name}",
        selected_semester=semester,
        semesters=list(range(1, ctx.config.ui.semesters + 1)),
        subjects=[SubjectResponse.from_subject(s) for s in subjects],
        empty_state=empty_state,
    )


@router.get("/", response_model=DashboardResponse)
async def dashboard(
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> DashboardResponse:
    """Subjects for the currently selected semester."""
    return _dashboard(ctx, user)


@router.put("/api/dashboard/semester", response_model=DashboardResponse)
async def select_semester(
    body: SemesterRequest,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> DashboardResponse:
    """Change the selected semester."""
    ctx.catalog.select_semester(body.semester)
    return _dashboard(ctx, user)
