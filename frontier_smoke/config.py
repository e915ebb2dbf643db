import os
from dotenv import find_dotenv, load_dotenv
import logging

logger = logging.getLogger(__name__)

# Load environment variables from the .env where the command is run
if not load_dotenv(find_dotenv(usecwd=True)):
    logger.warning("⚠️ No .env file loaded, using process environment only")

# Frontier API
FRONTIER_HOST = os.getenv("FRONTIER_HOST", "http://localhost:8002").rstrip("/")
FRONTIER_CALLBACK_URL = os.getenv("FRONTIER_CALLBACK_URL", "localhost:8002")
FRONTIER_ORG_ID = os.getenv("FRONTIER_ORG_ID", "e674dbb1-14b4-4ce9-b834-adc2c34948d3")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Frontier's backing database, used only to read the OTP nonce
DATABASE_URL = os.getenv("DATABASE_URL", "user=frontier host=localhost port=5432 sslmode=disable")

# Service user tokens
FRONTIER_TOKEN_ISSUER = os.getenv("FRONTIER_TOKEN_ISSUER", "frontier-smoke")
SERVICE_TOKEN_VALIDITY_HOURS = int(os.getenv("SERVICE_TOKEN_VALIDITY_HOURS", "12"))

# Service names in the Connect paths
FRONTIER_SERVICE = "raystack.frontier.v1beta1.FrontierService"
ADMIN_SERVICE = "raystack.frontier.v1beta1.AdminService"


def endpoint(service: str, method: str) -> str:
    """Path of a Connect RPC, e.g. /raystack.frontier.v1beta1.FrontierService/AuthToken."""
    return f"/{service}/{method}"


def get_email():
    """Email to log in with, read at call time so --email and tests can override it."""
    return os.getenv("EMAIL", "").strip()
