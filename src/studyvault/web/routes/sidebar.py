"""Sidebar endpoints."""

from fastapi import APIRouter, Depends

from studyvault.core.sidebar_state import links_for
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context
from studyvault.web.schemas import NavLinkResponse, SidebarResponse, ViewportRequest

router = APIRouter(prefix="/api/sidebar", tags=["sidebar"])


def _sidebar(ctx: AppContext) -> SidebarResponse:
    return SidebarResponse(
        is_open=ctx.sidebar.is_open,
        is_mobile=ctx.sidebar.is_mobile,
        links=[
            NavLinkResponse(to=link.to, label=link.label)
            for link in links_for(ctx.auth.user)
        ],
    )


@router.get("", response_model=SidebarResponse)
async def get_sidebar(ctx: AppContext = Depends(get_context)) -> SidebarResponse:
    return _sidebar(ctx)


@router.post("/open", response_model=SidebarResponse)
async def open_sidebar(ctx: AppContext = Depends(get_context)) -> SidebarResponse:
    ctx.sidebar.open()
    return _sidebar(ctx)


@router.post("/close", response_model=SidebarResponse)
async def close_sidebar(ctx: AppContext = Depends(get_context)) -> SidebarResponse:
    ctx.sidebar.close()
    return _sidebar(ctx)


@router.post("/toggle", response_model=SidebarResponse)
async def toggle_sidebar(ctx: AppContext = Depends(get_context)) -> SidebarResponse:
    ctx.sidebar.toggle()
    return _sidebar(ctx)


@router.post("/viewport", response_model=SidebarResponse)
async def resize_viewport(
    body: ViewportRequest, ctx: AppContext = Depends(get_context)
) -> SidebarResponse:
    """Report the viewport width; narrow widths close the sidebar."""
    ctx.sidebar.on_viewport_resize(body.width)
    return _sidebar(ctx)
