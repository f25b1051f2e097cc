from pathlib import Path
from trip.utilities.config import LOCAL_STORE_FILE

# Single source of truth for the local store location
LOCAL_STORE_PATH = Path(LOCAL_STORE_FILE).resolve()

__all__ = ['LOCAL_STORE_PATH']
