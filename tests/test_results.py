from app.results import (
    Err,
    Ok,
    combine_all,
    err,
    is_err,
    is_ok,
    map_error,
    map_result,
    ok,
)


def test_combine_all_collects_successes_in_order():
    assert combine_all([ok(1), ok(2)]) == ok([1, 2])


def test_combine_all_keeps_every_error():
    assert combine_all([ok(1), err("a"), err("b")]) == err(["a", "b"])


def test_combine_all_preserves_error_order_between_successes():
    combined = combine_all([err("first"), ok(2), err("second"), ok(4)])
    assert isinstance(combined, Err)
    assert combined.error == ["first", "second"]


def test_combine_all_of_nothing_is_empty_success():
    assert combine_all([]) == Ok([])


def test_combine_all_accepts_generators():
    combined = combine_all(ok(value) for value in range(3))
    assert combined == ok([0, 1, 2])


def test_predicates():
    assert is_ok(ok(None))
    assert not is_err(ok(None))
    assert is_err(err(None))
    assert not is_ok(err(None))


def test_map_result_only_touches_success():
    assert map_result(ok(2), lambda value: value * 10) == ok(20)
    assert map_result(err("boom"), lambda value: value * 10) == err("boom")


def test_map_error_only_touches_failure():
    assert map_error(err("boom"), str.upper) == err("BOOM")
    assert map_error(ok(3), str.upper) == ok(3)
