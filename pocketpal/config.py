# pocketpal/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")

# Supabase (records, storage and edge functions)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
FUNCTIONS_BASE_URL = os.getenv(
    "FUNCTIONS_BASE_URL", f"{SUPABASE_URL}/functions/v1" if SUPABASE_URL else None
)

# Text generation: "gateway" (OpenAI-compatible chat completions) or "gemini"
AI_PROVIDER = os.getenv("AI_PROVIDER", "gateway")
AI_GATEWAY_URL = os.getenv(
    "AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
)
AI_GATEWAY_KEY = os.getenv("AI_GATEWAY_KEY")
AI_MODEL = os.getenv("AI_MODEL", "google/gemini-3-flash-preview")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
NEWS_CACHE_TTL_SECONDS = int(os.getenv("NEWS_CACHE_TTL_SECONDS", "600"))

# Budget alerts
MONTHLY_BUDGET = os.getenv("MONTHLY_BUDGET", "200")
BUDGET_WARNING_THRESHOLD = os.getenv("BUDGET_WARNING_THRESHOLD", "20")

# Every day-bucketing computation uses this zone for both records and "today"
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
