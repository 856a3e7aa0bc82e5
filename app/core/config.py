"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

# Database (Postgres in production, local SQLite file for development)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./local.db")

# OpenAI API Key for the AI coach
# IMPORTANT: Do NOT hardcode keys in code or commit them to git.
# Set OPENAI_API_KEY in your environment (or hosting provider env vars).
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "30"))
COMPLETION_MAX_TOKENS = int(os.getenv("COMPLETION_MAX_TOKENS", "1000"))

# Shown to users whenever the AI coach is unavailable
SUPPORT_EMAIL = os.getenv("SUPPORT_EMAIL", "support@resentmentrelease.com")

# Free tier may only have this many journeys in "active" status at once
FREE_ACTIVE_JOURNEY_LIMIT = int(os.getenv("FREE_ACTIVE_JOURNEY_LIMIT", "1"))

# Conversation history listing
CONVERSATION_HISTORY_LIMIT = 50
PREVIEW_LENGTH = 100

ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1"
