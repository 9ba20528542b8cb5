import pytest

from spendwise.functional import Left, Right, pipe


def test_either_map():
    doubled = Right(5).map(lambda x: x * 2)

    assert doubled.is_right()
    assert doubled == Right(10)

    mapped_left = Left("error").map(lambda x: x * 2)
    assert mapped_left.is_left()
    assert mapped_left.get_error() == "error"


def test_either_recover():
    assert Right(3).recover(lambda err: 0) == 3
    assert Left("boom").recover(len) == 4


def test_map_then_recover_chain():
    assert Right(2).map(str).recover(repr) == "2"
    assert Left(ValueError("x")).map(str).recover(lambda e: type(e).__name__) == "ValueError"


def test_right_has_no_error():
    with pytest.raises(ValueError):
        Right(1).get_error()


def test_pipe_simple():
    def add1(x):
        return x + 1
    def mul2(x):
        return x * 2
    # pipe(3, add1, mul2) -> mul2(add1(3)) = 8
    assert pipe(3, add1, mul2) == 8
    assert pipe("unchanged") == "unchanged"
