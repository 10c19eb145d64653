"""API routes."""

from fastapi import APIRouter

from resourcehub.routes import auth, references, resources, users

api_router = APIRouter()

# Sign-in (GitHub OAuth, sessions)
api_router.include_router(auth.router, prefix="/api/auth", tags=["auth"])

# Resources (listings, popularity, search, mutations)
api_router.include_router(resources.router, prefix="/api/resources", tags=["resources"])

# Per-user ledger (votes, favorites) and owned resources
api_router.include_router(users.router, prefix="/api/users", tags=["users"])

# Reference data
api_router.include_router(references.router, prefix="/api", tags=["reference"])
