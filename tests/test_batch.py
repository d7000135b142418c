import pytest

from conftest import ABC_DIGEST, HELLO_DIGEST, PASSWORD_COUNT, PASSWORD_DIGEST, FakeRangeSource
from core.domain.errors import BatchAbortedError, EncodingError, QueryError, ServiceUnavailableError
from core.domain.models import ExposureResult, SkippedCredential
from core.services.batch import BatchHooks, check_secret, process


def test_results_follow_input_order(corpus):
    results = list(process(["password", "hello", "abc"], corpus))

    assert [r.position for r in results] == [1, 2, 3]
    assert [(r.exposed, r.count) for r in results] == [
        (True, PASSWORD_COUNT),
        (False, None),
        (True, 42),
    ]
    assert corpus.queries == [PASSWORD_DIGEST[:5], HELLO_DIGEST[:5], ABC_DIGEST[:5]]


def test_single_value_is_treated_as_one_item(corpus):
    [result] = list(process("password", corpus))
    assert result == ExposureResult(position=1, exposed=True, count=PASSWORD_COUNT)


def test_bytes_value_is_treated_as_one_item(corpus):
    [result] = list(process(b"hello", corpus))
    assert result.exposed is False


def test_streamed_input_is_consumed_lazily(corpus):
    pulled: list[str] = []

    def stream():
        for secret in ("password", "hello", "abc"):
            pulled.append(secret)
            yield secret

    outcomes = process(stream(), corpus)
    first = next(outcomes)

    assert first.position == 1
    assert pulled == ["password"]
    assert len(list(outcomes)) == 2


def test_query_failure_aborts_the_rest_of_the_batch():
    failure = ServiceUnavailableError("connection reset", prefix=HELLO_DIGEST[:5])
    source = FakeRangeSource(
        responses={PASSWORD_DIGEST[:5]: [(PASSWORD_DIGEST[5:], PASSWORD_COUNT)]},
        failures={HELLO_DIGEST[:5]: failure},
    )
    pulled: list[str] = []

    def stream():
        for secret in ("password", "hello", "abc"):
            pulled.append(secret)
            yield secret

    emitted = []
    with pytest.raises(BatchAbortedError) as excinfo:
        for outcome in process(stream(), source):
            emitted.append(outcome)

    assert [o.position for o in emitted] == [1]
    assert excinfo.value.position == 2
    assert excinfo.value.completed == 1
    assert excinfo.value.__cause__ is failure
    assert isinstance(excinfo.value, QueryError)
    assert source.queries == [PASSWORD_DIGEST[:5], HELLO_DIGEST[:5]]
    assert pulled == ["password", "hello"]


def test_encoding_error_skips_only_that_item(corpus):
    skipped: list[SkippedCredential] = []
    hooks = BatchHooks(skipped=skipped.append)

    outcomes = list(process([b"password", b"\xff\xfe", b"abc"], corpus, hooks=hooks))

    assert [type(o) for o in outcomes] == [ExposureResult, SkippedCredential, ExposureResult]
    assert outcomes[1].position == 2
    assert skipped == [outcomes[1]]
    assert len(corpus.queries) == 2


def test_item_start_hook_sees_every_position(corpus):
    started: list[int] = []
    list(process(["password", "hello", "abc"], corpus, hooks=BatchHooks(item_start=started.append)))
    assert started == [1, 2, 3]


def test_empty_input_yields_nothing(corpus):
    assert list(process([], corpus)) == []
    assert corpus.queries == []


def test_check_secret(corpus):
    assert check_secret("abc", corpus) == ExposureResult(position=1, exposed=True, count=42)


def test_check_secret_propagates_encoding_error(corpus):
    with pytest.raises(EncodingError):
        check_secret(b"\xc3\x28", corpus)


def test_exposure_result_requires_count_iff_exposed():
    with pytest.raises(ValueError):
        ExposureResult(position=1, exposed=True)
    with pytest.raises(ValueError):
        ExposureResult(position=1, exposed=False, count=3)
