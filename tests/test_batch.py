"""Tests for batched object inserts."""

import json
import re
from types import SimpleNamespace

import pytest
from googleapiclient.errors import HttpError

from transit_wallet.api.batch import BatchObjectAPI, MockBatchObjectAPI, random_suffix
from transit_wallet.api.objects import TransitObject

from .conftest import ISSUER_ID

CLASS_ID = f"{ISSUER_ID}.bus-pass"


class FakeBatch:
    """Stands in for googleapiclient's BatchHttpRequest."""

    def __init__(self, callback):
        self.callback = callback
        self.requests = []
        self.executed = 0

    def add(self, request, request_id=None):
        self.requests.append((request_id, request))

    def execute(self):
        self.executed += 1
        for request_id, request in self.requests:
            body = request["body"]
            if body.get("classId"):
                self.callback(request_id, dict(body), None)
            else:
                content = json.dumps({
                    "error": {
                        "code": 400,
                        "message": "classId is required",
                        "errors": [{"reason": "invalidResource", "domain": "global"}],
                    }
                }).encode("utf-8")
                resp = SimpleNamespace(status=400, reason="Bad Request")
                self.callback(request_id, None, HttpError(resp, content))


class FakeService:
    def __init__(self):
        self.batches = []

    def new_batch_http_request(self, callback=None):
        batch = FakeBatch(callback)
        self.batches.append(batch)
        return batch

    def transitobject(self):
        return self

    def insert(self, body=None):
        return {"body": body}


def three_objects_one_malformed():
    return [
        TransitObject(id=f"{ISSUER_ID}.a", class_id=CLASS_ID),
        {"id": f"{ISSUER_ID}.b", "state": "ACTIVE"},
        TransitObject(id=f"{ISSUER_ID}.c", class_id=CLASS_ID),
    ]


class TestBatchObjectAPI:
    def test_single_round_trip_with_independent_results(self) -> None:
        service = FakeService()
        api = BatchObjectAPI(auth=None, service=service)

        results = api.batch_create_objects(ISSUER_ID, "bus-pass",
                                           objects=three_objects_one_malformed())

        assert len(service.batches) == 1
        assert service.batches[0].executed == 1
        assert [r.ok for r in results] == [True, False, True]
        assert [r.object_id for r in results] == [f"{ISSUER_ID}.a", f"{ISSUER_ID}.b", f"{ISSUER_ID}.c"]
        assert results[1].error.status_code == 400
        assert results[1].error.reason == "invalidResource"

    def test_generates_requested_number_of_objects(self) -> None:
        service = FakeService()
        api = BatchObjectAPI(auth=None, service=service)

        results = api.batch_create_objects(ISSUER_ID, "bus-pass", count=5)

        assert len(results) == 5
        assert all(r.ok for r in results)
        assert len({r.object_id for r in results}) == 5
        assert all(r.resource["classId"] == CLASS_ID for r in results)

    def test_prints_ids_and_errors(self, capsys) -> None:
        api = BatchObjectAPI(auth=None, service=FakeService())

        api.batch_create_objects(ISSUER_ID, "bus-pass", objects=three_objects_one_malformed())

        out = capsys.readouterr().out
        assert f"✓ {ISSUER_ID}.a" in out
        assert "invalidResource" in out


class TestMockBatchObjectAPI:
    def test_malformed_item_does_not_fail_the_batch(self, objects_api) -> None:
        api = MockBatchObjectAPI(objects_api)

        results = api.batch_create_objects(ISSUER_ID, "bus-pass",
                                           objects=three_objects_one_malformed())

        assert [r.ok for r in results] == [True, False, True]
        assert results[1].error.reason == "invalidResource"
        assert objects_api.get_stored(f"{ISSUER_ID}.a")["classId"] == CLASS_ID
        assert objects_api.get_stored(f"{ISSUER_ID}.c")["classId"] == CLASS_ID
        with pytest.raises(KeyError):
            objects_api.get_stored(f"{ISSUER_ID}.b")


class TestRandomSuffix:
    def test_only_id_safe_characters(self) -> None:
        suffix = random_suffix()

        assert re.fullmatch(r"[\w.-]+", suffix)
        assert suffix != random_suffix()
