import pytest

from vrec.auth.passwords import hash_password, verify_password


def test_hash_is_salted_and_verifies():
    h1 = hash_password("correct horse")
    h2 = hash_password("correct horse")
    assert h1 != h2
    assert "correct horse" not in h1
    assert h1.startswith("$argon2")
    assert verify_password(h1, "correct horse")
    assert verify_password(h2, "correct horse")


def test_wrong_password_is_rejected():
    h = hash_password("correct horse")
    assert not verify_password(h, "battery staple")


def test_empty_inputs():
    with pytest.raises(ValueError):
        hash_password("")
    assert not verify_password("", "x")
    assert not verify_password(hash_password("x"), "")


def test_garbage_hash_does_not_raise():
    assert not verify_password("not-a-hash", "x")
