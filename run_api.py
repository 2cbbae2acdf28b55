"""FastAPI development server launcher.

Usage:
    python run_api.py

The server will start on http://localhost:8000
API docs available at http://localhost:8000/api/docs
"""

import uvicorn

if __name__ == "__main__":
    print("Starting HabitRPG API...")
    print("API docs: http://localhost:8000/api/docs")
    print("Health check: http://localhost:8000/api/health")
    print("\nPress Ctrl+C to stop\n")

    uvicorn.run(
        "habitrpg.interfaces.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
        log_level="info",
    )
