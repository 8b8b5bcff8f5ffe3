"""
API v1 Router

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from credtube.api.v1.endpoints import admin, auth, courses, functions, progress, tokens, users

router = APIRouter()

# Include authentication routes
router.include_router(auth.router)

# Include user routes
router.include_router(users.router)

# Include catalogue routes
router.include_router(courses.router)

# Include progress and quiz routes
router.include_router(progress.router)

# Include learning token routes
router.include_router(tokens.router)
router.include_router(tokens.public_router)

# Include stateless function routes
router.include_router(functions.router)

# Include admin routes
router.include_router(admin.router)
