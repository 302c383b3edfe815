# config.py
import os
from dotenv import load_dotenv

# ─ load your .env
load_dotenv()

# ─ Discord credentials
BOT_TOKEN = os.getenv("BOT_TOKEN")  # your Discord bot token

# ─ Users allowed to run admin commands (comma separated Discord user IDs)
ADMIN_IDS = {uid.strip() for uid in os.getenv("ADMIN_IDS", "").split(",") if uid.strip()}

# ─ Where the JSON caches and log files live
DATA_DIR = os.getenv("DATA_DIR", "data")
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MODS_CACHE_FILE = os.path.join(DATA_DIR, "mods_cache.json")
NOTIFICATIONS_CACHE_FILE = os.path.join(DATA_DIR, "notifications_cache.json")
SPOTREP_CACHE_FILE = os.path.join(DATA_DIR, "spotrep_cache.json")

COMBINED_LOG_FILE = os.path.join(LOG_DIR, "combined.log")
ERROR_LOG_FILE = os.path.join(LOG_DIR, "error.log")

# ─ Polling cadence
MOD_CHECK_INTERVAL_SECS = int(os.getenv("MOD_CHECK_INTERVAL_SECS", "3"))          # one mod per tick
SPOTREP_CHECK_INTERVAL_SECS = int(os.getenv("SPOTREP_CHECK_INTERVAL_SECS", "60"))
HTTP_TIMEOUT_SECS = int(os.getenv("HTTP_TIMEOUT_SECS", "20"))

# ─ Discord allows 2000 chars per message, leave room for code fences and mentions
MESSAGE_CHUNK_SIZE = 1900

# ─ Remote pages
SPOTREP_URL = "https://dev.arma3.com/spotrep"
STEAM_CHANGELOG_URL = "https://steamcommunity.com/sharedfiles/filedetails/changelog/{mod_id}"

BOT_NAME = "Steam Workshop Notifications Discord Bot"
BOT_VERSION = "2.0.0"
