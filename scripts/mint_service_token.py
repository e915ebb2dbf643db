#!/usr/bin/env python3
"""
Mint a Frontier service user token from the key credential in the environment.

Prints the signed JWT to stdout so it can be pasted into curl:

    TOKEN=$(python scripts/mint_service_token.py)
    curl -H "authorization: Bearer $TOKEN" ...

Reads FRONTIER_PRIVATE_KEY, FRONTIER_KEY_ID, FRONTIER_PRINCIPAL_ID and
optionally FRONTIER_TOKEN_ISSUER / SERVICE_TOKEN_VALIDITY_HOURS (.env is loaded).
"""

import os
import sys
import logging

# Add parent directory to path to import the frontier_smoke package
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from frontier_smoke.auth import get_svc_account_access_token
from frontier_smoke.exceptions import AuthFlowError

# Logs go to stderr so stdout only carries the token
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s', stream=sys.stderr)
logger = logging.getLogger(__name__)

def main():
    """Print a freshly signed service user token."""
    try:
        token = get_svc_account_access_token()
    except AuthFlowError as e:
        logger.error(f"❌ Could not mint service user token: {str(e)}")
        return 1

    logger.info("✅ Service user token minted")
    print(token)
    return 0

if __name__ == "__main__":
    sys.exit(main())
