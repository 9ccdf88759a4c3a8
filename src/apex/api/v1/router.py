from fastapi import APIRouter

from src.apex.api.v1 import audit, auth, projects, roles, rooms, tasks, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(roles.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(rooms.router)
api_router.include_router(audit.router)
