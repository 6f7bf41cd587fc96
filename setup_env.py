#!/usr/bin/env python3
"""
Environment setup script for the legal prompt assistant.
This script helps set up the required environment variables.
"""

import importlib
import sys
from pathlib import Path

ENV_TEMPLATE = """# Gemini API credential (required)
API_KEY=your-gemini-api-key

# Optional: model and server configuration
GEMINI_MODEL=gemini-2.5-flash
LOG_LEVEL=INFO
BIND_HOST=127.0.0.1
PORT=8000
"""

REQUIRED_MODULES = ["fastapi", "uvicorn", "pydantic", "dotenv", "multipart", "google.genai"]


def create_env_file(path: str = ".env") -> Path:
    """Create a .env file with required environment variables."""
    env_file = Path(path)

    if env_file.exists():
        backup = env_file.with_name(env_file.name + ".backup")
        print(f"⚠️  {env_file} already exists. Backing up to {backup}")
        env_file.rename(backup)

    env_file.write_text(ENV_TEMPLATE, encoding="utf-8")

    print("✅ Created .env file with template values")
    print("📝 Please update the .env file with your Gemini API key")
    return env_file


def check_requirements() -> bool:
    """Check if required packages are installed."""
    for name in REQUIRED_MODULES:
        try:
            importlib.import_module(name)
        except ImportError as e:
            print(f"❌ Missing required package: {e}")
            print("📦 Please run: pip install -e .")
            return False
    print("✅ All required packages are installed")
    return True


def main():
    print("🚀 Setting up the legal prompt assistant environment...")
    print()

    if not check_requirements():
        sys.exit(1)

    create_env_file()

    print()
    print("🎉 Setup complete!")
    print()
    print("Next steps:")
    print("1. Put your Gemini API key in API_KEY inside .env")
    print("2. Run: python -m uvicorn main:app --reload --host 0.0.0.0 --port 8000")
    print()


if __name__ == "__main__":
    main()
