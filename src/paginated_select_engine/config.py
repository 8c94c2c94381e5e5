# src/paginated_select_engine/config.py
import os
from dotenv import load_dotenv

# Load environment variables from a .env file for local development.
load_dotenv()


# Paging
PAGINATED_SELECT_PAGE_SIZE = int(os.getenv("PAGINATED_SELECT_PAGE_SIZE", "10"))

# Search debounce window in milliseconds
PAGINATED_SELECT_DEBOUNCE_MS = int(os.getenv("PAGINATED_SELECT_DEBOUNCE_MS", "300"))

# Adapter call timeouts (seconds). 0 disables the timeout.
PAGINATED_SELECT_FETCH_TIMEOUT_SECONDS = float(os.getenv("PAGINATED_SELECT_FETCH_TIMEOUT_SECONDS", "30"))
PAGINATED_SELECT_LOOKUP_TIMEOUT_SECONDS = float(os.getenv("PAGINATED_SELECT_LOOKUP_TIMEOUT_SECONDS", "30"))

# Diagnostics
PAGINATED_SELECT_DEBUG = os.getenv("PAGINATED_SELECT_DEBUG", "false").lower() in ("1", "true", "yes")
PAGINATED_SELECT_LOG_LEVEL = os.getenv("PAGINATED_SELECT_LOG_LEVEL", "INFO")

SERVICE_NAME = os.getenv("SERVICE_NAME", "paginated-select-engine")
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
