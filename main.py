"""
Phone Settings Automation - Main Entry Point

Serves the HTTP API that updates phone numbers through the target platform's settings UI.
"""
import uvicorn

from api.dependencies import get_settings
from core.logger import app_log


def main():
    """Run the API server."""
    settings = get_settings()
    host, port = settings.server.host, settings.server.port

    app_log(f"🚀 Phone Settings Automation API running on port {port}")
    app_log(f"📊 Health check: http://localhost:{port}/health")
    app_log(f"📚 API Documentation: http://localhost:{port}/api-docs")
    app_log("📱 Available endpoints:")
    app_log("   POST /settings/phone - Update phone number in website settings")
    bound = settings.browser.max_sessions or "unbounded"
    app_log(f"🧭 Concurrent browser sessions: {bound}")

    uvicorn.run("api.routes:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
