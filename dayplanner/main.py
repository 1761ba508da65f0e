import logging

from fastapi import FastAPI

from dayplanner.config import LOG_LEVEL
from dayplanner.database import engine, Base
from dayplanner.routes import events, schedule
from dayplanner.scheduling import __version__

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Day Planner API",
    description="Projects Work, Side, Deep and Planning sessions into the free time of a calendar day",
    version=__version__
)

# Include routers
app.include_router(events.router, prefix="/events", tags=["events"])
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Day Planner API",
        "version": __version__,
        "features": [
            "Session projection into free calendar time",
            "Built-in presets and ordering patterns",
            "Existing-session awareness via #work/#side/#deep/#plan tags",
        ],
        "endpoints": {
            "preview": "POST /schedule/preview - Project the day's sessions",
            "commit": "POST /schedule/commit - Project and save the day's sessions",
            "availability": "POST /schedule/availability - Free time and session capacity",
            "single": "POST /schedule/single - Project one session",
            "presets": "GET /schedule/presets - Built-in presets",
            "patterns": "GET /schedule/patterns - Ordering patterns",
            "events": "GET /events/date, POST /events/, DELETE /events/sessions",
        },
        "swagger_ui": "/docs - Interactive API documentation",
        "redoc": "/redoc - Alternative API documentation"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

# This allows running the app directly with: python -m dayplanner.main
if __name__ == "__main__":
    import uvicorn
    print("🚀 Starting Day Planner API...")
    print("📖 API Documentation: http://localhost:8000/docs")
    uvicorn.run("dayplanner.main:app", host="0.0.0.0", port=8000, reload=True)
