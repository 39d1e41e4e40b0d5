# tests/test_response.py

from core.response import ErrorCode, Response


def test_succeed_carries_record():
    response = Response.succeed(detail="ok", data={"record": "c001"})

    assert response
    assert response.status_code == 200
    assert response.record == "c001"
    assert str(response) == "Success: ok"


def test_fail_defaults():
    response = Response.fail(detail="missing", error=ErrorCode.NOT_FOUND, trace="tb")

    assert not response
    assert response.status_code == 400
    assert response.record is None
    assert response.trace == "tb"
    assert str(response) == "Error: NOT_FOUND"
