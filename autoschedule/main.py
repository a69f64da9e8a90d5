import logging

from fastapi import FastAPI

from . import settings
from .database import engine
from .models import Base
from .routes import scheduling, task_schedules

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Autoschedule API",
    description="Places auto-scheduled tasks into working-hours calendar slots and tracks deadline risk",
    version="1.0.0"
)

# Include routers
app.include_router(scheduling.router, prefix="/scheduling", tags=["scheduling"])
app.include_router(task_schedules.router, prefix="/task-schedules", tags=["task-schedules"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Autoschedule API",
        "version": "1.0.0",
        "endpoints": {
            "schedule_task": "POST /scheduling/tasks/{task_id}/schedule - Place one task",
            "reschedule_all": "POST /scheduling/reschedule-all - Re-place every auto-scheduled task",
            "eta": "POST /scheduling/eta - Compute an ETA for a date pair",
            "refresh_etas": "POST /scheduling/etas/refresh - Recompute cached ETAs",
            "deadline_conflicts": "GET /scheduling/deadline-conflicts - Tasks at risk or overdue",
            "task_schedules": "CRUD /task-schedules/* - Named working-hours schedules"
        },
        "authentication": "Bearer token in Authorization header",
        "swagger_ui": "/docs - Interactive API documentation",
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

# This allows running the app directly with: python -m autoschedule.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("autoschedule.main:app", host="0.0.0.0", port=8000, reload=True)
