"""Identity gateways used by the session store."""

import logging
from dataclasses import dataclass, asdict

import httpx

from crewdesk.domain.errors import AuthError, ErrorCode, RemoteError, ValidationError
from crewdesk.domain.serialization import decode_user
from crewdesk.domain.users import LoginCredentials, SignupData, UserProfile
from crewdesk.services.sessions import IdentityGateway
from crewdesk.services.users import IdentityService

_logger = logging.getLogger(__name__)


@dataclass
class HttpxIdentityGateway(IdentityGateway):
    """Calls the crewdesk backend's user endpoints over HTTP."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxIdentityGateway":
        """Create a gateway with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def login(self, credentials: LoginCredentials) -> UserProfile:
        """POST credentials to ``/users/login``."""
        return await self._post("/users/login", asdict(credentials))

    async def signup(self, data: SignupData) -> UserProfile:
        """POST signup data to ``/users/signup``."""
        payload = asdict(data)
        payload["role"] = data.role.value
        payload["service_type"] = data.service_type.value
        return await self._post("/users/signup", payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _post(self, path: str, payload: dict[str, object]) -> UserProfile:
        try:
            response = await self.http_client.post(
                f"{self.base_url}{path}", json=payload, timeout=10
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"Identity service unreachable: {exc}") from exc

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise AuthError(ErrorCode.INVALID_CREDENTIALS)
        if response.status_code == httpx.codes.CONFLICT:
            raise AuthError(ErrorCode.EMAIL_ALREADY_EXISTS)
        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY:
            raise ValidationError(_error_detail(response))
        if response.is_error:
            _logger.warning(
                "Identity service %s returned %s", path, response.status_code
            )
            raise RemoteError(
                f"Identity service error: {response.status_code}",
                status_code=response.status_code,
                detail=response.text[:200],
            )
        try:
            return decode_user(response.json())
        except ValueError as exc:
            raise RemoteError("Identity service returned malformed JSON") from exc
        except ValidationError as exc:
            raise RemoteError("Identity service returned a malformed user") from exc


@dataclass
class LocalIdentityGateway(IdentityGateway):
    """Calls an in-process identity service."""

    service: IdentityService

    async def login(self, credentials: LoginCredentials) -> UserProfile:
        return self.service.login_user(credentials.email, credentials.password)

    async def signup(self, data: SignupData) -> UserProfile:
        return await self.service.create_user(data)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or "Invalid request"
    detail = body.get("detail") if isinstance(body, dict) else None
    return str(detail) if detail else "Invalid request"
