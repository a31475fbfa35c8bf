"""
Store Sales Dashboard API

Main entry point. The catalog is built once during start-up.
"""

from store_dashboard.config import get_settings
from store_dashboard.config.logging import configure_logging
from store_dashboard.serving.api import create_api_app

settings = get_settings()

configure_logging(settings)

app = create_api_app(settings=settings)


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Store Sales Dashboard API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
