"""Constants for pd-uploader."""

# Remote service
SERVICE_NAME = "PixelDrain.com"
BASE_URL = "https://pixeldrain.com/"
API_URL = BASE_URL + "api"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/79.0.3945.117 Safari/537.36"
)
DEFAULT_TIMEOUT = 3600.0  # seconds

# Project marker directory and files inside it
UPLOADER_DIR = ".pd-uploader"
CONFIG_FILE = "config.yaml"

# Persisted stores (relative to the working directory unless configured)
LEDGER_FILE = "hashes.csv"
TEST_LEDGER_FILE = "test_hashes.csv"
AUDIT_LOG_FILE = "upload_logs.csv"

# Environment variables
ENV_MODE_VAR = "ENV_MODE"
API_KEY_VAR = "PIXELDRAIN_API_KEY"
API_URL_VAR = "PIXELDRAIN_API_URL"

# Synthetic outcome for skipped duplicates
DUPLICATE_STATUS_CODE = 409
DUPLICATE_MESSAGE = "Duplicate file. Upload skipped."

# Version
UPLOADER_VERSION = "0.1.0"
