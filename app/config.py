import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from app.utils.logger import config as configure_logger

# Load .env as early as possible so all downstream imports see the intended env
load_dotenv()

# Configure logger after env is loaded (LOG_LEVEL honored)
configure_logger()

logger.debug("Checking if running in Docker...")
IN_DOCKER = Path("/.dockerenv").exists()
logger.debug(f"IN_DOCKER={IN_DOCKER}")


def _as_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    try:
        return int((val or "").strip() or default)
    except ValueError:
        logger.warning(f"Invalid integer value {val!r}; using {default}.")
        return default


def _str_to_path(val: str | os.PathLike[str] | None) -> Path | None:
    if not val:
        return None
    try:
        return Path(val).expanduser()
    except Exception:
        return None


def _ensure_dir(candidates: list[Path], label: str) -> Path:
    """Return first usable path from candidates, creating it if needed.

    Logs fallbacks and exits with a clear error if none are writable.
    """
    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            resolved = p.resolve()
            logger.info(f"{label} using: {resolved}")
            return resolved
        except PermissionError as e:
            logger.warning(f"No permission to create {label} at {p}: {e}")
        except OSError as e:
            logger.warning(f"Cannot create {label} at {p}: {e}")

    logger.error(f"No writable candidate found for {label}. Tried: {candidates}")
    raise SystemExit(
        f"Fatal: {label} is not writable. Please fix your volume mounts or set"
        f" a writable {label} via environment variables. Tried:"
        f" {', '.join(str(c) for c in candidates)}"
    )


# Resolve configured data path (treat empty env as unset)
env_data = os.getenv("DATA_DIR")
env_data_path = _str_to_path(env_data.strip() if env_data else None)
default_data = Path("/data") if IN_DOCKER else (Path.cwd() / "data")

data_candidates: list[Path] = []
if env_data_path:
    data_candidates.append(env_data_path)
data_candidates.extend(
    [
        default_data,
        Path("/app/data"),
        Path.cwd() / "data",
        Path("/tmp/vodbridge"),
    ]
)
DATA_DIR = _ensure_dir(data_candidates, "DATA_DIR")

# --- Playback URL rewriting ---
# Explicit origin used for rewritten playback URLs; falls back to request headers.
SITE_BASE = os.getenv("SITE_BASE", "").strip()
# Optional access token appended to media-proxy URLs (&token=...).
PROXY_M3U8_TOKEN = (
    os.getenv("PROXY_M3U8_TOKEN") or os.getenv("NEXT_PUBLIC_PROXY_M3U8_TOKEN") or ""
).strip()
# Path of the external media-proxy endpoint rewritten URLs point to.
PROXY_M3U8_PATH = os.getenv("PROXY_M3U8_PATH", "/api/proxy-m3u8").strip() or "/api/proxy-m3u8"
logger.debug(
    f"SITE_BASE={SITE_BASE or '<none>'}, PROXY_M3U8_PATH={PROXY_M3U8_PATH}, "
    f"PROXY_M3U8_TOKEN={'set' if PROXY_M3U8_TOKEN else '<none>'}"
)

# --- CMS forwarding ---
CMS_PROXY_TIMEOUT_SECONDS = float(os.getenv("CMS_PROXY_TIMEOUT_SECONDS", "15") or 15)
if CMS_PROXY_TIMEOUT_SECONDS <= 0:
    CMS_PROXY_TIMEOUT_SECONDS = 15.0
CMS_PROXY_USER_AGENT = os.getenv(
    "CMS_PROXY_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
)
# Reserved value of the `api` query field that selects the synthesized backend.
CMS_SYNTHESIZED_API = os.getenv("CMS_SYNTHESIZED_API", "openlist").strip() or "openlist"
logger.debug(
    f"CMS_PROXY_TIMEOUT_SECONDS={CMS_PROXY_TIMEOUT_SECONDS}, CMS_SYNTHESIZED_API={CMS_SYNTHESIZED_API}"
)

# --- OpenList (directory store) ---
OPENLIST_ENABLED = _as_bool(os.getenv("OPENLIST_ENABLED", None), True)
OPENLIST_URL = os.getenv("OPENLIST_URL", "").strip().rstrip("/")
OPENLIST_USERNAME = os.getenv("OPENLIST_USERNAME", "").strip()
OPENLIST_PASSWORD = os.getenv("OPENLIST_PASSWORD", "").strip()
OPENLIST_ROOT_PATH = os.getenv("OPENLIST_ROOT_PATH", "/").strip() or "/"
OPENLIST_PAGE_SIZE = max(1, _as_int(os.getenv("OPENLIST_PAGE_SIZE"), 100))
OPENLIST_TOKEN_TTL_SECONDS = _as_int(os.getenv("OPENLIST_TOKEN_TTL_SECONDS"), 3600)
logger.debug(
    f"OPENLIST_ENABLED={OPENLIST_ENABLED}, OPENLIST_URL={OPENLIST_URL or '<none>'}, "
    f"OPENLIST_ROOT_PATH={OPENLIST_ROOT_PATH}, OPENLIST_PAGE_SIZE={OPENLIST_PAGE_SIZE}"
)

# Global key under which the serialized folder metadata index is stored.
METAINFO_KEY = os.getenv("METAINFO_KEY", "video.metainfo").strip() or "video.metainfo"

# --- Poster images ---
TMDB_IMAGE_BASE_URL = (
    os.getenv("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org").strip().rstrip("/")
)
TMDB_IMAGE_SIZE = os.getenv("TMDB_IMAGE_SIZE", "w500").strip() or "w500"

# --- CORS for browser-based players ---
# Comma-separated origins; "*" allows any origin (credentials then disabled).
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").strip()
CORS_ALLOW_CREDENTIALS = _as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", None), False)
logger.debug(f"CORS_ORIGINS={CORS_ORIGINS or '<off>'}, CORS_ALLOW_CREDENTIALS={CORS_ALLOW_CREDENTIALS}")

VODBRIDGE_RELOAD = _as_bool(os.getenv("VODBRIDGE_RELOAD", None), False)
VODBRIDGE_HOST = os.getenv("VODBRIDGE_HOST", "0.0.0.0").strip() or "0.0.0.0"
VODBRIDGE_PORT = int(os.getenv("VODBRIDGE_PORT", "8000") or 8000)


@dataclass(frozen=True)
class OpenListConfig:
    """Credentials and root folder of the OpenList directory store."""

    url: str
    username: str
    password: str
    root_path: str = "/"


def get_openlist_config() -> Optional[OpenListConfig]:
    """
    Return the OpenList configuration when the backend is enabled and complete.

    Returns:
        OpenListConfig | None: `None` when OPENLIST_ENABLED is false or any of
        the URL, username or password is empty.
    """
    if not OPENLIST_ENABLED:
        logger.debug("OpenList backend disabled.")
        return None
    if not (OPENLIST_URL and OPENLIST_USERNAME and OPENLIST_PASSWORD):
        logger.debug("OpenList backend not configured.")
        return None
    return OpenListConfig(
        url=OPENLIST_URL,
        username=OPENLIST_USERNAME,
        password=OPENLIST_PASSWORD,
        root_path=OPENLIST_ROOT_PATH,
    )
