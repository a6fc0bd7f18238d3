"""Application configuration via environment variables."""

import os
from dotenv import load_dotenv

load_dotenv()

# Database (in-memory SQLite by default: records live for the process lifetime)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite://")

# Grok (xAI) API — generation gateway
GROK_API_KEY = os.getenv("GROK_API_KEY", "")
GROK_MODEL = os.getenv("GROK_MODEL", "grok-3-mini")
GROK_IMAGE_MODEL = os.getenv("GROK_IMAGE_MODEL", "grok-2-image")
GROK_VISION_MODEL = os.getenv("GROK_VISION_MODEL", "grok-2-vision-1212")
GROK_BASE_URL = os.getenv("GROK_BASE_URL", "https://api.x.ai/v1")
GATEWAY_TIMEOUT = float(os.getenv("GATEWAY_TIMEOUT", "120"))

# Accounts for the static authenticator, as a JSON list of
# {"id", "username", "password", "role", "display_name"} objects.
ACCOUNTS_JSON = os.getenv("ACCOUNTS_JSON", "")

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
