"""
Central configuration — reads from .env file.

Every module reads settings as attributes of this module (config.X), so tests
can monkeypatch a single attribute without touching the environment.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# ── Telegram ──────────────────────────────────────────────────────────────────
# Only main.py requires the token; importing config without it is fine (tests).
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Comma-separated Telegram user IDs allowed to add catalog products,
# e.g. "123456789,987654321". Get your ID by messaging @userinfobot.
ADMIN_IDS: set[int] = {
    int(x.strip())
    for x in os.getenv("ADMIN_IDS", "").split(",")
    if x.strip().isdigit()
}

# ── AI Vision (Google Gemini) ─────────────────────────────────────────────────
# Free key at https://aistudio.google.com
GOOGLE_API_KEY: str | None = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL: str          = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# ── Catalog store ─────────────────────────────────────────────────────────────
# 1. Go to https://mockapi.io and create a free account.
# 2. Create a project and a resource named "products".
# 3. Paste the resource URL here, e.g. https://<id>.mockapi.io/products
CATALOG_ENDPOINT: str = os.getenv("CATALOG_ENDPOINT", "").strip()
CATALOG_LIMIT: int    = int(os.getenv("CATALOG_LIMIT", "100"))

HTTP_TIMEOUT_SECS: float = float(os.getenv("HTTP_TIMEOUT_SECS", "15"))

# ── Bot behaviour ─────────────────────────────────────────────────────────────
# Product cards (and "Visit link" buttons) shown per results message
MAX_RESULTS_SHOWN: int = int(os.getenv("MAX_RESULTS_SHOWN", "10"))

# Log file directory
DATA_DIR: str = os.getenv("DATA_DIR", "data")
