"""
Unit tests for the error model.
"""

import pytest

from jobboard_api.errors import (
    DeadlinePassed,
    DuplicateApplication,
    DuplicateIdentity,
    ErrorCode,
    Forbidden,
    InvalidCredential,
    InvalidStatusTransition,
    JobBoardError,
    JobClosed,
    MissingRoleAttribute,
    NotFound,
    UpstreamStoreFailure,
)


class TestErrorCode:
    def test_error_codes_are_strings(self):
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code == code.value


class TestJobBoardError:
    @pytest.mark.parametrize(
        "cls,status",
        [
            (DuplicateIdentity, 400),
            (MissingRoleAttribute, 400),
            (InvalidCredential, 401),
            (Forbidden, 403),
            (NotFound, 404),
            (JobClosed, 400),
            (DeadlinePassed, 400),
            (DuplicateApplication, 400),
            (InvalidStatusTransition, 409),
            (UpstreamStoreFailure, 500),
        ],
    )
    def test_status_codes(self, cls, status):
        err = cls()
        assert isinstance(err, JobBoardError)
        assert err.status_code == status

    def test_default_and_custom_message(self):
        assert NotFound().message == "Resource not found"
        assert NotFound("Job not found").message == "Job not found"
        assert str(NotFound("Job not found")) == "Job not found"

    def test_to_dict(self):
        body = JobClosed().to_dict()
        assert body == {
            "success": False,
            "error": {
                "code": "JOB_CLOSED",
                "message": "This job is no longer accepting applications",
            },
        }

    def test_wraps_original_error(self):
        original = RuntimeError("connection reset")
        err = UpstreamStoreFailure(original_error=original)
        assert err.original_error is original
        # never leaks the underlying message
        assert "connection reset" not in err.to_dict()["error"]["message"]
