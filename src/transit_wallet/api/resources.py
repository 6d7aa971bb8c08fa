"""
Pass Resource Client
====================
Shared REST plumbing for the transitClass and transitObject collections

Every resource lives at {collection}/{issuerId}.{suffix}. The Wallet API
has no upsert, so creates are get-or-create on our side, and every
mutation is preceded by a lookup that stops early when the resource is
missing.

Key Concepts:
- get / insert / update (PUT, full replace) / patch (PATCH, merge)
- addMessage appends a header/body message to the resource
- "Not found" is recognised by the reason code in the error payload
"""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import requests

from ..utils.config import config
from .auth import WalletAuth

logger = logging.getLogger(__name__)


def format_id(issuer_id: str, suffix: str) -> str:
    """Composite resource ID: "{issuer_id}.{suffix}" """
    return f"{issuer_id}.{suffix}"


class WalletApiError(Exception):
    """
    Error returned by the Wallet REST API

    Google APIs answer failures with:
    {
        "error": {
            "code": 404,
            "message": "...",
            "errors": [{"reason": "classNotFound", "message": "..."}]
        }
    }
    """

    def __init__(self, status_code: int, message: str, reason: str = None,
                 errors: List[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.reason = reason
        self.errors = errors or []

    @classmethod
    def from_payload(cls, status_code: int, payload: Any) -> "WalletApiError":
        error = payload.get("error", {}) if isinstance(payload, dict) else {}
        if not isinstance(error, dict):
            # Some endpoints send {"error": "text"}
            error = {"message": str(error)}
        errors = error.get("errors") or []
        reason = errors[0].get("reason") if errors else None
        message = error.get("message") or f"HTTP {status_code}"
        return cls(status_code, message, reason=reason, errors=errors)

    @classmethod
    def from_content(cls, status_code: int, content: bytes) -> "WalletApiError":
        try:
            payload = json.loads(content or b"{}")
        except ValueError:
            payload = {"error": {"message": content.decode("utf-8", "replace")}}
        return cls.from_payload(status_code, payload)

    @classmethod
    def from_response(cls, response: requests.Response) -> "WalletApiError":
        return cls.from_content(response.status_code, response.content)

    def is_not_found(self, reason: str) -> bool:
        return self.reason == reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.status_code,
            "message": self.message,
            "errors": self.errors,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict())


class ResultStatus(Enum):
    """Outcome of a high-level resource operation"""
    SUCCESS = "SUCCESS"       # Mutation submitted
    EXISTS = "EXISTS"         # Create skipped, resource already there
    NOT_FOUND = "NOT_FOUND"   # Mutation skipped, resource missing
    ERROR = "ERROR"           # Any other remote failure


@dataclass
class ApiResult:
    status: ResultStatus
    resource_id: str
    resource: Optional[Dict[str, Any]] = None
    error: Optional[WalletApiError] = None

    @property
    def ok(self) -> bool:
        return self.status in (ResultStatus.SUCCESS, ResultStatus.EXISTS)


class PassResourceAPI:
    """
    REST client for one Wallet resource collection

    Subclasses set the collection path, the reason code the API uses for
    a missing resource, and a label for console output.
    """

    collection = ""
    not_found_reason = "resourceNotFound"
    label = "Resource"

    def __init__(self, auth: WalletAuth, base_url: str = None, timeout: int = None):
        self.auth = auth
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.timeout = timeout or config.timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.collection}"

    # =========================================================================
    # Transport: one call per REST method
    # =========================================================================

    def _request(self, method: str, url: str, body: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.debug("%s %s", method, url)
        try:
            response = self.auth.session.request(method, url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            print(f"\n✗ {method} {url} failed: {e}")
            raise
        logger.debug("%s %s -> %s", method, url, response.status_code)

        if not response.ok:
            raise WalletApiError.from_response(response)
        return response.json() if response.content else {}

    def get(self, resource_id: str) -> Dict[str, Any]:
        """GET /{collection}/{id}"""
        return self._request("GET", f"{self.endpoint}/{resource_id}")

    def insert(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST /{collection}"""
        return self._request("POST", self.endpoint, body)

    def update(self, resource_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """PUT /{collection}/{id} - replaces the whole resource"""
        return self._request("PUT", f"{self.endpoint}/{resource_id}", body)

    def patch(self, resource_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """PATCH /{collection}/{id} - merges the given fields"""
        return self._request("PATCH", f"{self.endpoint}/{resource_id}", body)

    def add_message(self, resource_id: str, header: str, body: str) -> Dict[str, Any]:
        """POST /{collection}/{id}/addMessage"""
        payload = {"message": {"header": header, "body": body}}
        return self._request("POST", f"{self.endpoint}/{resource_id}/addMessage", payload)

    # =========================================================================
    # Existence checks shared by the class and object flows
    # =========================================================================

    def lookup(self, resource_id: str) -> ApiResult:
        """
        Fetch a resource, turning API errors into a result

        SUCCESS carries the resource; NOT_FOUND and ERROR carry the error.
        """
        try:
            return ApiResult(ResultStatus.SUCCESS, resource_id, resource=self.get(resource_id))
        except WalletApiError as e:
            if e.is_not_found(self.not_found_reason):
                return ApiResult(ResultStatus.NOT_FOUND, resource_id, error=e)
            print(f"\n✗ {self.label} lookup failed for {resource_id}:")
            print(f"  {e}")
            return ApiResult(ResultStatus.ERROR, resource_id, error=e)

    def get_or_create(self, resource_id: str, body: Dict[str, Any]) -> ApiResult:
        existing = self.lookup(resource_id)
        if existing.status == ResultStatus.SUCCESS:
            print(f"{self.label} {resource_id} already exists!")
            return ApiResult(ResultStatus.EXISTS, resource_id, resource=existing.resource)
        if existing.status == ResultStatus.ERROR:
            return existing

        return self._submit("insert", resource_id, lambda: self.insert(body))

    def require_existing(self, resource_id: str) -> ApiResult:
        """Lookup that reports a missing resource to the console"""
        existing = self.lookup(resource_id)
        if existing.status == ResultStatus.NOT_FOUND:
            print(f"{self.label} {resource_id} not found!")
        return existing

    def _submit(self, action: str, resource_id: str,
                call: Callable[[], Dict[str, Any]]) -> ApiResult:
        try:
            response = call()
        except WalletApiError as e:
            print(f"\n✗ {self.label} {action} failed for {resource_id}:")
            print(f"  {e}")
            return ApiResult(ResultStatus.ERROR, resource_id, error=e)

        # addMessage wraps the resource in {"resource": {...}}
        resource = response.get("resource", response)
        print(f"\n✓ {self.label} {action} response")
        print(f"  ID: {resource.get('id', resource_id)}")
        return ApiResult(ResultStatus.SUCCESS, resource.get("id", resource_id), resource=resource)


# =============================================================================
# MOCK: In-memory collection for running without credentials
# =============================================================================

class InMemoryCollectionMixin:
    """
    Replaces the REST transport with a dict keyed by resource ID

    Mimics the API's error reasons so the get-or-create and not-found
    flows behave exactly as against the real service. Every transport
    call is recorded in `calls` as (method, resource_id).
    """

    required_fields = ("id",)

    def _init_store(self) -> None:
        self._store: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []

    def _missing(self, resource_id: str) -> WalletApiError:
        return WalletApiError(
            404,
            f"Resource {resource_id} not found",
            reason=self.not_found_reason,
            errors=[{"reason": self.not_found_reason, "domain": "global"}],
        )

    def get(self, resource_id: str) -> Dict[str, Any]:
        self.calls.append(("GET", resource_id))
        if resource_id not in self._store:
            raise self._missing(resource_id)
        return json.loads(json.dumps(self._store[resource_id]))

    def insert(self, body: Dict[str, Any]) -> Dict[str, Any]:
        resource_id = body.get("id")
        self.calls.append(("POST", resource_id))
        missing = [name for name in self.required_fields if not body.get(name)]
        if missing:
            raise WalletApiError(
                400,
                f"Missing required field(s): {', '.join(missing)}",
                reason="invalidResource",
                errors=[{"reason": "invalidResource", "domain": "global"}],
            )
        if resource_id in self._store:
            raise WalletApiError(
                409,
                f"Resource {resource_id} already exists",
                reason="duplicate",
                errors=[{"reason": "duplicate", "domain": "global"}],
            )
        self._store[resource_id] = json.loads(json.dumps(body))
        return self.get_stored(resource_id)

    def update(self, resource_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("PUT", resource_id))
        if resource_id not in self._store:
            raise self._missing(resource_id)
        replaced = json.loads(json.dumps(body))
        replaced["id"] = resource_id
        self._store[resource_id] = replaced
        return self.get_stored(resource_id)

    def patch(self, resource_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("PATCH", resource_id))
        if resource_id not in self._store:
            raise self._missing(resource_id)
        self._store[resource_id].update(json.loads(json.dumps(body)))
        return self.get_stored(resource_id)

    def add_message(self, resource_id: str, header: str, body: str) -> Dict[str, Any]:
        self.calls.append(("addMessage", resource_id))
        if resource_id not in self._store:
            raise self._missing(resource_id)
        messages = self._store[resource_id].setdefault("messages", [])
        messages.append({"header": header, "body": body})
        return {"resource": self.get_stored(resource_id)}

    def get_stored(self, resource_id: str) -> Dict[str, Any]:
        return json.loads(json.dumps(self._store[resource_id]))

    @property
    def mutating_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] != "GET"]
