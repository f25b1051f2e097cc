"""Configuration management for the trip data layer."""
import os
from typing import Final, Optional
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Remote store (Supabase / PostgREST)
SUPABASE_URL: Final[Optional[str]] = os.getenv('SUPABASE_URL')
SUPABASE_ANON_KEY: Final[Optional[str]] = os.getenv('SUPABASE_ANON_KEY')
SUPABASE_ACCESS_TOKEN: Final[Optional[str]] = os.getenv('SUPABASE_ACCESS_TOKEN')
SUPABASE_USER_ID: Final[Optional[str]] = os.getenv('SUPABASE_USER_ID')
REMOTE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('REMOTE_TIMEOUT_SECONDS', '10'))

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Persistence timing
SAVE_DEBOUNCE_MS: Final[int] = int(os.getenv('SAVE_DEBOUNCE_MS', '150'))
CLEANUP_INTERVAL_MINUTES: Final[int] = int(os.getenv('CLEANUP_INTERVAL_MINUTES', '15'))
TEMP_RETENTION_MINUTES: Final[int] = int(os.getenv('TEMP_RETENTION_MINUTES', '30'))
VERIFY_GROUP_ASSIGNMENTS: Final[bool] = os.getenv('VERIFY_GROUP_ASSIGNMENTS', 'True').lower() == 'true'

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
LOCAL_STORE_FILE: Final[Path] = Path(os.getenv('LOCAL_STORE_FILE', str(BASE_DIR / 'data' / 'local_store.json')))
