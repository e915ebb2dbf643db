from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from jose import jwk, jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ConfigDict, Field
import os
import uuid
import logging

from . import config
from .exceptions import AuthFlowError

logger = logging.getLogger(__name__)

# Service user tokens are verified by Frontier against the uploaded public key
ALGORITHM = "RS256"
MAILOTP_STRATEGY = "mailotp"

class AuthRequest(BaseModel):
    strategy_name: str = MAILOTP_STRATEGY
    redirect_onstart: bool = False
    return_to: str = "<string>"
    email: str
    callback_url: str = Field(default_factory=lambda: config.FRONTIER_CALLBACK_URL)

class AuthCallback(BaseModel):
    strategy_name: str = MAILOTP_STRATEGY
    code: str
    state: str

class ListUsersRequest(BaseModel):
    page_size: int = 10
    page_number: int = 1

class GetOrganizationRequest(BaseModel):
    id: str

class AuthTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")

class KeyCredential(BaseModel):
    private_key: str
    type: Optional[str] = None
    kid: str
    principal_id: str

    @classmethod
    def from_env(cls) -> "KeyCredential":
        """Build the service user credential from FRONTIER_* environment variables."""
        values = {
            "FRONTIER_PRIVATE_KEY": os.getenv("FRONTIER_PRIVATE_KEY", ""),
            "FRONTIER_KEY_ID": os.getenv("FRONTIER_KEY_ID", ""),
            "FRONTIER_PRINCIPAL_ID": os.getenv("FRONTIER_PRINCIPAL_ID", ""),
        }
        missing = [name for name, value in values.items() if not value.strip()]
        if missing:
            raise AuthFlowError(f"missing environment variables: {', '.join(missing)}", step="KeyCredential")

        # .env files often carry the PEM on one line with escaped newlines
        private_key = values["FRONTIER_PRIVATE_KEY"].replace("\\n", "\n")
        return cls(
            private_key=private_key,
            type=os.getenv("FRONTIER_KEY_TYPE") or None,
            kid=values["FRONTIER_KEY_ID"].strip(),
            principal_id=values["FRONTIER_PRINCIPAL_ID"].strip(),
        )

ServiceUserTokenGenerator = Callable[[], str]

def build_token(key, issuer: str, subject: str, validity: timedelta, kid: str) -> str:
    """Sign a short lived JWT for a principal."""
    now = datetime.now(timezone.utc)
    claims = {
        "iss": issuer,
        "sub": subject,
        "iat": now,
        "nbf": now,
        "exp": now + validity,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, key, algorithm=ALGORITHM, headers={"kid": kid})

def get_service_user_token_generator(
    credential: KeyCredential,
    issuer: Optional[str] = None,
    validity: Optional[timedelta] = None,
) -> ServiceUserTokenGenerator:
    """
    Parse the credential's private key once and return a callable that mints
    a fresh token on every call.
    """
    issuer = issuer or config.FRONTIER_TOKEN_ISSUER
    if validity is None:
        validity = timedelta(hours=config.SERVICE_TOKEN_VALIDITY_HOURS)

    try:
        rsa_key = jwk.construct(credential.private_key, ALGORITHM)
    except (JOSEError, ValueError) as e:
        raise AuthFlowError(f"invalid private key for kid {credential.kid}: {str(e)}", step="KeyCredential") from e

    def generate() -> str:
        try:
            return build_token(rsa_key, issuer, credential.principal_id, validity, credential.kid)
        except JOSEError as e:
            raise AuthFlowError(f"failed to sign token: {str(e)}", step="KeyCredential") from e

    return generate

def get_svc_account_access_token() -> str:
    """Mint a service user access token from the credential in the environment."""
    credential = KeyCredential.from_env()
    logger.debug(f"Minting service user token for principal {credential.principal_id} (kid={credential.kid})")
    generate = get_service_user_token_generator(credential)
    return generate()
