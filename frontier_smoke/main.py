"""
Frontier auth smoke test.

Runs the whole authentication surface of a local Frontier deployment in order:

1. Authenticate with the mailotp strategy
2. Read the OTP nonce straight from the flows table
3. AuthCallback, keeping the sid session cookie
4. AuthToken, exchanging the cookie for a bearer token
5. ListAllUsers with the bearer token
6. ListAllUsers with the cookie
7. GetOrganization with a service user token minted from a key credential
8. AuthLogout

Usage:
    EMAIL=you@example.com python -m frontier_smoke.main
    frontier-smoke --email you@example.com --verbose
"""

import argparse
from typing import List, Optional

from . import client, config
from .auth import get_svc_account_access_token
from .console import (
    log_banner, log_data, log_error, log_info, log_step, log_success, log_usage, log_warning, setup_logging,
)
from .db import NONCE_QUERY, get_nonce_from_db
from .exceptions import AuthFlowError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Smoke test Frontier authentication end to end")
    parser.add_argument("--email", default=None, help="Email to log in with (defaults to $EMAIL)")
    parser.add_argument("--verbose", action="store_true", help="Log response headers and request ids")
    return parser.parse_args(argv)


def check_result(result: client.ApiResult, label: str, failures: List[str]):
    """Record a protected endpoint call that did not return 2xx; the flow keeps going."""
    if not result.ok:
        log_warning(f"{label} returned HTTP {result.status_code}")
        failures.append(f"{label} (HTTP {result.status_code})")


def run_user_flow(email: str, failures: List[str]) -> str:
    """Steps 1-6. Returns the sid cookie so the session can be logged out at the end."""
    log_banner("Starting authentication flow for email", email)

    # Step 1: Initial authentication request
    log_step("Step 1: Making initial authentication request...")
    log_info(f"Endpoint: {client.AUTHENTICATE}")
    try:
        auth_response = client.make_auth_request(email)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to make authentication request: {e}") from e
    log_data(f"Authentication response: {auth_response}")

    try:
        state = client.extract_state(auth_response)
    except AuthFlowError as e:
        log_data(f"Response was: {auth_response}")
        raise AuthFlowError(f"Could not extract state from response: {e}") from e
    log_success(f"Extracted state: {state}")

    # Step 2: Query database for nonce
    log_step("Step 2: Querying database for nonce...")
    log_info(f"Database: {' '.join(NONCE_QUERY.split())} [{email}]")
    try:
        nonce = get_nonce_from_db(email)
    except AuthFlowError as e:
        raise AuthFlowError(f"Could not retrieve nonce from database for email: {email} - {e}") from e
    log_success(f"Retrieved nonce: {nonce}")

    # Step 3: Authentication callback
    log_step("Step 3: Making authentication callback...")
    log_info(f"Endpoint: {client.AUTH_CALLBACK}")
    try:
        callback_response = client.make_auth_callback(nonce, state)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to make authentication callback: {e}") from e
    log_success("Authentication callback completed successfully!")

    try:
        sid_cookie = client.extract_sid_cookie(callback_response)
    except AuthFlowError as e:
        raise AuthFlowError(f"Could not extract sid cookie from callback response: {e}") from e
    finally:
        callback_response.close()
    log_success(f"Extracted sid cookie: {sid_cookie}")

    # Step 4: Get auth token using the cookie
    log_step("Step 4: Getting auth token...")
    log_info(f"Endpoint: {client.AUTH_TOKEN}")
    try:
        token_response = client.get_auth_token_with_cookie(sid_cookie)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to get auth token: {e}") from e
    log_success("Retrieved auth token successfully!")

    # Step 5: List all users using the bearer token
    log_step("Step 5: Making API call to list all users with bearer token...")
    log_info(f"Endpoint: {client.LIST_ALL_USERS}")
    try:
        users_with_token = client.list_users_with_token(token_response.access_token)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to list users with token: {e}") from e
    check_result(users_with_token, "ListAllUsers with bearer token", failures)

    # Step 6: Same call with the cookie for comparison
    log_step("Step 6: Making API call to list all users with cookie...")
    log_info(f"Endpoint: {client.LIST_ALL_USERS}")
    try:
        users_with_cookie = client.list_users_with_cookie(sid_cookie)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to list users with cookie: {e}") from e
    check_result(users_with_cookie, "ListAllUsers with cookie", failures)

    log_success("User API calls completed successfully!")
    log_data(f"Users response (with token): {users_with_token.body}")
    log_data(f"Users response (with cookie): {users_with_cookie.body}")
    return sid_cookie


def run_service_user_flow(failures: List[str]):
    """Step 7: call the API as a service user with a self-signed token."""
    log_banner("Starting authentication flow for service account", "API Test")

    try:
        access_token = get_svc_account_access_token()
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to get svc account access token from the pvt key: {e}") from e

    log_step("Step 7: Getting org using Access token of service user...")
    log_info(f"Endpoint: {client.GET_ORGANIZATION}")
    try:
        org_response = client.get_organization_with_service_token(access_token)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to get org with svc user access token: {e}") from e
    check_result(org_response, "GetOrganization with service user token", failures)

    log_success("Svc User API calls completed successfully!")
    log_data(f"Svc User response (with token): {org_response.body}")


def run_logout(sid_cookie: str, failures: List[str]):
    # Step 8: Logout the user
    log_step("Step 8: Logging out user...")
    log_info(f"Endpoint: {client.AUTH_LOGOUT}")
    try:
        logout_response = client.logout(sid_cookie)
    except AuthFlowError as e:
        raise AuthFlowError(f"Failed to logout: {e}") from e
    check_result(logout_response, "AuthLogout", failures)
    if logout_response.ok:
        log_success("Logged out successfully!")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    email = (args.email or config.get_email()).strip()
    if not email:
        log_error("EMAIL environment variable is not set")
        log_usage("Usage: EMAIL=your@email.com frontier-smoke")
        return 1

    failures: List[str] = []
    try:
        sid_cookie = run_user_flow(email, failures)
        run_service_user_flow(failures)
        run_logout(sid_cookie, failures)
    except AuthFlowError as e:
        log_error(str(e))
        return 1

    if failures:
        log_error(f"{len(failures)} check(s) failed: {', '.join(failures)}")
        return 1
    log_success("All authentication checks passed")
    return 0


def run():
    raise SystemExit(main())


if __name__ == "__main__":
    run()
