#!/usr/bin/env python3
"""
Marketing Attribution API Startup Script

This script starts the attribution FastAPI server with the API documentation.
"""

import sys
from pathlib import Path

import uvicorn


def main():
    """Start the attribution API server."""
    print("🚀 Starting Marketing Attribution API Server...")
    print("📊 Features:")
    print("   ✅ Period presets")
    print("   ✅ Creative / Campaign Ranking")
    print("   ✅ Summary Cards & Daily Metrics")
    print("   ✅ Lost-Sale Breakdown")
    print("")
    print("📖 Documentation will be available at:")
    print("   🌐 Swagger UI:  http://localhost:8000/docs")
    print("   📚 ReDoc:       http://localhost:8000/redoc")
    print("")

    # Check for environment file
    env_file = Path(".env")
    if not env_file.exists():
        print("⚠️  WARNING: No .env file found!")
        print("   Optional variables:")
        print("   TIMEZONE=America/Sao_Paulo")
        print("   DEFAULT_PERIOD=this_month")
        print("   SENTRY_DSN=https://...")
        print("")

    try:
        uvicorn.run(
            "attribution_engine.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            reload_dirs=["attribution_engine"],
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n👋 Shutting down attribution API server...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
