"""
Batch Object Creation
=====================
Several transitObject inserts sent as one multipart HTTP request

Batching only saves round trips: every item succeeds or fails on its
own, and results come back per request in submission order.
"""
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from googleapiclient import discovery
from googleapiclient.errors import HttpError

from .auth import WalletAuth, MockWalletAuth
from .objects import MockTransitObjectAPI, TransitObject
from .resources import WalletApiError, format_id

logger = logging.getLogger(__name__)


def random_suffix() -> str:
    """Unique object suffix limited to the characters IDs accept"""
    return re.sub(r"[^\w.-]", "_", uuid.uuid4().hex)


@dataclass
class BatchItemResult:
    """Outcome of one request inside a batch"""
    request_id: str
    object_id: Optional[str]
    resource: Optional[Dict[str, Any]] = None
    error: Optional[WalletApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchObjectAPI:
    """
    Batch insert client built on the discovery-based Wallet service

    Usage:
        batch_api = BatchObjectAPI(WalletAuth())
        results = batch_api.batch_create_objects(issuer_id, "my-class")
    """

    def __init__(self, auth: WalletAuth, service: Any = None):
        self.auth = auth
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = discovery.build(
                "walletobjects", "v1", credentials=self.auth.credentials, cache_discovery=False
            )
        return self._service

    def batch_create_objects(
        self,
        issuer_id: str,
        class_suffix: str,
        count: int = 3,
        objects: Optional[List[Union[TransitObject, Dict[str, Any]]]] = None,
    ) -> List[BatchItemResult]:
        """
        Insert several objects with one batch request

        Without `objects`, `count` sample tickets with random suffixes are
        generated under the given class.
        """
        print(f"\n{'='*60}")
        print("Batch Create Objects")
        print(f"{'='*60}")

        if objects is None:
            class_id = format_id(issuer_id, class_suffix)
            objects = [
                TransitObject(id=format_id(issuer_id, random_suffix()), class_id=class_id)
                for _ in range(count)
            ]
        bodies = [o.to_dict() if isinstance(o, TransitObject) else o for o in objects]
        print(f"Requests in batch: {len(bodies)}")

        results = self._execute(bodies)

        print("\nBatch insert response")
        for result in results:
            if result.ok:
                print(f"  ✓ {result.object_id}")
            else:
                print(f"  ✗ {result.error}")
        return results

    def _execute(self, bodies: List[Dict[str, Any]]) -> List[BatchItemResult]:
        results: Dict[str, BatchItemResult] = {}

        def collect(request_id, response, exception):
            results[request_id] = self._to_result(bodies[int(request_id)], request_id,
                                                  response, exception)

        batch = self.service.new_batch_http_request(callback=collect)
        for index, body in enumerate(bodies):
            batch.add(self.service.transitobject().insert(body=body), request_id=str(index))
        logger.debug("Executing batch of %d inserts", len(bodies))
        batch.execute()

        return [results[str(index)] for index in range(len(bodies))]

    @staticmethod
    def _to_result(body: Dict[str, Any], request_id: str, response: Optional[Dict[str, Any]],
                   exception: Optional[Exception]) -> BatchItemResult:
        if exception is None:
            return BatchItemResult(request_id, (response or {}).get("id", body.get("id")),
                                   resource=response)
        if isinstance(exception, HttpError):
            exception = WalletApiError.from_content(int(exception.resp.status), exception.content)
        if not isinstance(exception, WalletApiError):
            raise exception
        return BatchItemResult(request_id, body.get("id"), error=exception)


# =============================================================================
# MOCK: Simulated API for Testing
# =============================================================================

class MockBatchObjectAPI(BatchObjectAPI):
    """Runs each batched insert against a mock object store, in order"""

    def __init__(self, objects_api: MockTransitObjectAPI = None, auth: MockWalletAuth = None):
        self.objects_api = objects_api or MockTransitObjectAPI(auth)
        super().__init__(self.objects_api.auth, service=None)

    def _execute(self, bodies: List[Dict[str, Any]]) -> List[BatchItemResult]:
        results = []
        for index, body in enumerate(bodies):
            try:
                response, error = self.objects_api.insert(body), None
            except WalletApiError as e:
                response, error = None, e
            results.append(self._to_result(body, str(index), response, error))
        return results
