"""
HTTP calls for each step of the Frontier auth flow.

Frontier exposes its RPCs as Connect JSON endpoints, so every call is a
POST with a JSON body. Each function makes exactly one request and returns
either the value the next step needs or the raw status and body.
"""

import json
import re
import secrets
import logging
import requests
from pydantic import BaseModel, ValidationError

from . import config
from .auth import AuthCallback, AuthRequest, AuthTokenResponse, GetOrganizationRequest, ListUsersRequest
from .exceptions import AuthFlowError

logger = logging.getLogger(__name__)

SID_COOKIE = "sid"
STATE_PATTERN = re.compile(r'"state":"([^"]*)"')

AUTHENTICATE = config.endpoint(config.FRONTIER_SERVICE, "Authenticate")
AUTH_CALLBACK = config.endpoint(config.FRONTIER_SERVICE, "AuthCallback")
AUTH_TOKEN = config.endpoint(config.FRONTIER_SERVICE, "AuthToken")
AUTH_LOGOUT = config.endpoint(config.FRONTIER_SERVICE, "AuthLogout")
GET_ORGANIZATION = config.endpoint(config.FRONTIER_SERVICE, "GetOrganization")
LIST_ALL_USERS = config.endpoint(config.ADMIN_SERVICE, "ListAllUsers")


class ApiResult(BaseModel):
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def generate_request_id() -> str:
    return secrets.token_hex(16)


def print_resp_headers(response: requests.Response):
    for name, value in response.headers.items():
        logger.debug(f"======headers===== {name}: {value}")


def _post(path: str, payload=None, sid_cookie: str = None, bearer_token: str = None) -> requests.Response:
    """POST a JSON payload to a Frontier RPC and return the raw response."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "x-request-id": generate_request_id(),
    }
    if sid_cookie:
        headers["Cookie"] = f"{SID_COOKIE}={sid_cookie}"
    if bearer_token:
        headers["authorization"] = f"Bearer {bearer_token}"

    if isinstance(payload, BaseModel):
        payload = payload.model_dump()

    try:
        response = requests.post(
            f"{config.FRONTIER_HOST}{path}",
            data=json.dumps(payload if payload is not None else {}),
            headers=headers,
            timeout=config.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise AuthFlowError(f"failed to make API call: {str(e)}", step=path) from e

    logger.debug(f"POST {path} -> {response.status_code} (x-request-id={headers['x-request-id']})")
    print_resp_headers(response)
    return response


def _require_success(response: requests.Response, path: str):
    if not response.ok:
        raise AuthFlowError(f"unexpected status {response.status_code}: {response.text}", step=path)


def make_auth_request(email: str) -> str:
    """Start a mail OTP login and return the raw response body."""
    response = _post(AUTHENTICATE, AuthRequest(email=email))
    _require_success(response, AUTHENTICATE)
    return response.text


def extract_state(json_response: str) -> str:
    """Pull the flow state out of the Authenticate response."""
    try:
        result = json.loads(json_response)
    except ValueError:
        # Fallback to regex if JSON parsing fails
        match = STATE_PATTERN.search(json_response)
        if match:
            return match.group(1)
        raise AuthFlowError("could not extract state from response", step=AUTHENTICATE)

    state = result.get("state") if isinstance(result, dict) else None
    if not isinstance(state, str) or not state:
        raise AuthFlowError("state not found in response", step=AUTHENTICATE)
    return state


def make_auth_callback(nonce: str, state: str) -> requests.Response:
    """Finish the login with the OTP nonce; the response carries the session cookie."""
    response = _post(AUTH_CALLBACK, AuthCallback(code=nonce, state=state))
    _require_success(response, AUTH_CALLBACK)
    return response


def extract_sid_cookie(response: requests.Response) -> str:
    sid = response.cookies.get(SID_COOKIE)
    if not sid:
        raise AuthFlowError(f"{SID_COOKIE} cookie not found in response", step=AUTH_CALLBACK)
    return sid


def get_auth_token_with_cookie(sid_cookie: str) -> AuthTokenResponse:
    """Exchange the session cookie for a bearer access token."""
    response = _post(AUTH_TOKEN, sid_cookie=sid_cookie)
    _require_success(response, AUTH_TOKEN)
    try:
        return AuthTokenResponse.model_validate_json(response.text)
    except ValidationError as e:
        raise AuthFlowError(f"failed to parse response: {str(e)}", step=AUTH_TOKEN) from e


def list_users_with_token(access_token: str) -> ApiResult:
    response = _post(LIST_ALL_USERS, ListUsersRequest(), bearer_token=access_token)
    return ApiResult(status_code=response.status_code, body=response.text)


def list_users_with_cookie(sid_cookie: str) -> ApiResult:
    response = _post(LIST_ALL_USERS, ListUsersRequest(), sid_cookie=sid_cookie)
    return ApiResult(status_code=response.status_code, body=response.text)


def get_organization_with_service_token(access_token: str, org_id: str = None) -> ApiResult:
    payload = GetOrganizationRequest(id=org_id or config.FRONTIER_ORG_ID)
    response = _post(GET_ORGANIZATION, payload, bearer_token=access_token)
    return ApiResult(status_code=response.status_code, body=response.text)


def logout(sid_cookie: str) -> ApiResult:
    """End the browser session behind the sid cookie."""
    response = _post(AUTH_LOGOUT, sid_cookie=sid_cookie)
    return ApiResult(status_code=response.status_code, body=response.text)
