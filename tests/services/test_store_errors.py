import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from exam_portal.core.decorators import translate_store_errors
from exam_portal.core.exceptions import NotFound, StoreUnavailable


def test_operational_error_becomes_retryable():
    @translate_store_errors
    def flaky():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    with pytest.raises(StoreUnavailable) as exc_info:
        flaky()
    assert exc_info.value.retryable is True
    assert exc_info.value.status_code == 503


def test_domain_errors_pass_through():
    @translate_store_errors
    def missing():
        raise NotFound("gone")

    with pytest.raises(NotFound):
        missing()


def test_integrity_errors_are_not_masked():
    @translate_store_errors
    def conflict():
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(IntegrityError):
        conflict()
