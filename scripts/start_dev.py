#!/usr/bin/env python3
"""
Development startup script.

Starts the REST proxy and the web storefront in development mode.
"""

import os
import sys
import subprocess
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

API_PORT = os.getenv("API_PORT", "3001")
WEB_PORT = os.getenv("PORT", "3000")


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import pydantic_settings
        import jinja2
        import dotenv
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Check if .env file exists and names a store."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if not env_file.exists():
        if not env_example.exists():
            print("✗ No configuration file found")
            return False
        print("! Configuration file not found, copying from example...")
        import shutil
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")

    from dotenv import dotenv_values

    if not (dotenv_values(env_file).get("SHOPIFY_STORE_URL") or os.getenv("SHOPIFY_STORE_URL")):
        print("✗ SHOPIFY_STORE_URL is not set")
        print("  Please edit config/.env with your store domain")
        return False

    print("✓ Configuration file found")
    return True


def start_services():
    """Start both services in development mode."""
    processes = []

    try:
        print(f"\n🔌 Starting Storefront API on http://localhost:{API_PORT} ...")
        api_process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "storefront_api.main:app",
                "--reload",
                "--host", "0.0.0.0",
                "--port", API_PORT,
            ],
            cwd=PROJECT_ROOT,
        )
        processes.append(api_process)

        print(f"🛒 Starting Web Storefront on http://localhost:{WEB_PORT} ...")
        web_process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "storefront_web.main:app",
                "--reload",
                "--host", "0.0.0.0",
                "--port", WEB_PORT,
            ],
            cwd=PROJECT_ROOT,
        )
        processes.append(web_process)

        print("\n" + "=" * 60)
        print("Services started successfully!")
        print("=" * 60)
        print(f"\n📍 Storefront:    http://localhost:{WEB_PORT}")
        print(f"📍 Cart API:      http://localhost:{WEB_PORT}/api/cart")
        print(f"📍 REST proxy:    http://localhost:{API_PORT}/api")
        print(f"📍 Swagger docs:  http://localhost:{API_PORT}/api/docs")
        print("\nPress Ctrl+C to stop all services")
        print("=" * 60)

        # Wait for processes
        for p in processes:
            p.wait()

    except KeyboardInterrupt:
        print("\n\nShutting down services...")
        for p in processes:
            p.terminate()
        for p in processes:
            p.wait()
        print("All services stopped.")


def main():
    print("=" * 60)
    print("Headless Storefront - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    # Start services
    start_services()


if __name__ == "__main__":
    main()
