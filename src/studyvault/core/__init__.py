"""Core state and view-model logic.

Modules:
- models: User, Book, Subject view models
- catalog: subject grouping and book filters
- profile: profile derivation pipeline
- auth_state: session holder (login/signup/logout)
- catalog_state: book collection owner
- sidebar_state: mobile sidebar flag
- uploads: PDF validation and upload flow
- reader: PDF reference resolution
"""

__all__ = [
    "models",
    "catalog",
    "profile",
    "auth_state",
    "catalog_state",
    "sidebar_state",
    "uploads",
    "reader",
]
