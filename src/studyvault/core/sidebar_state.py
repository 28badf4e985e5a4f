"""Sidebar open/closed state.

Only meaningful on narrow viewports; on desktop the sidebar is always
laid out and this flag is left alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from studyvault.core.models import User

logger = structlog.get_logger(__name__)

DESKTOP_BREAKPOINT = 1024


@dataclass
class NavLink:
    """Sidebar navigation entry."""

    to: str
    label: str


STUDENT_LINKS = (
    NavLink(to="/", label="Dashboard"),
    NavLink(to="/books", label="My Books"),
)

ADMIN_LINKS = (
    NavLink(to="/", label="Dashboard"),
    NavLink(to="/books", label="All Books"),
    NavLink(to="/admin", label="Admin Panel"),
)


@dataclass
class SidebarState:
    """Mobile sidebar flag."""

    is_open: bool = False
    breakpoint: int = DESKTOP_BREAKPOINT
    viewport_width: int | None = field(default=None)

    @property
    def is_mobile(self) -> bool:
        return self.viewport_width is None or self.viewport_width < self.breakpoint

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> None:
        """Flip the flag; ignored on desktop widths."""
        if self.is_mobile:
            self.is_open = not self.is_open

    def on_viewport_resize(self, width: int) -> None:
        """Close the sidebar whenever the viewport is below the breakpoint."""
        self.viewport_width = width
        if width < self.breakpoint:
            if self.is_open:
                logger.debug("sidebar.closed_on_resize", width=width)
            self.is_open = False


def links_for(user: User | None) -> tuple[NavLink, ...]:
    if user is not None and user.is_admin:
        return ADMIN_LINKS
    return STUDENT_LINKS
