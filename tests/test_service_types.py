"""Tests for service layer types."""

from pd_uploader.service_types import OutcomeKind, UploadOutcome, UploadRequest, UploadResult
from pd_uploader.storage_models import Auth


def _outcome(kind=OutcomeKind.UPLOADED, success=True, status_code=201):
    return UploadOutcome(
        kind=kind,
        path="a.txt",
        file_name="a.txt",
        digest="0" * 64,
        status_code=status_code,
        success=success,
    )


def test_request_defaults():
    request = UploadRequest(path="a.txt")
    assert request.stream is None
    assert request.anonymous is False
    assert request.auth == Auth()


def test_outcome_skipped_flag():
    assert _outcome(OutcomeKind.SKIPPED_DUPLICATE, success=False, status_code=409).skipped
    assert not _outcome().skipped


def test_result_partitions():
    result = UploadResult(outcomes=[
        _outcome(),
        _outcome(OutcomeKind.SKIPPED_DUPLICATE, success=False, status_code=409),
        _outcome(success=False, status_code=500),
    ])

    assert len(result.uploaded) == 2
    assert len(result.skipped) == 1
    assert [o.status_code for o in result.rejected] == [500]
    assert result.summary == "2 uploaded, 1 skipped, 1 rejected"


def test_empty_result():
    assert UploadResult().summary == "0 uploaded, 0 skipped, 0 rejected"


def test_outcome_kind_values():
    assert OutcomeKind.UPLOADED.value == "uploaded"
    assert OutcomeKind.SKIPPED_DUPLICATE.value == "skipped"
