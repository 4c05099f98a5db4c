from fastapi import APIRouter

from app.api.v1.health import router as health_router
from app.api.v1.auth.router import router as auth_router
from app.api.v1.classes.router import router as classes_router
from app.api.v1.students.router import router as students_router
from app.api.v1.reminders.router import router as reminders_router
from app.api.v1.reports.router import router as reports_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth")  # Tags are defined in the router itself
api_router.include_router(classes_router, prefix="/classes", tags=["classes"])
api_router.include_router(students_router, prefix="/students", tags=["students"])
api_router.include_router(reminders_router, prefix="/reminders", tags=["reminders"])
api_router.include_router(reports_router, prefix="/reports")
