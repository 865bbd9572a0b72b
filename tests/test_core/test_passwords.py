from videotube.core.security import get_password_hash, verify_password


def test_hash_is_salted_and_verifies():
    first = get_password_hash("s3cret!")
    second = get_password_hash("s3cret!")

    assert first != second
    assert first.startswith("$2")
    assert verify_password("s3cret!", first)
    assert verify_password("s3cret!", second)


def test_wrong_password_does_not_verify():
    hashed = get_password_hash("s3cret!")
    assert not verify_password("S3cret!", hashed)


def test_missing_or_unparseable_hash_does_not_verify():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "")
    assert not verify_password("anything", "plaintext-not-a-hash")
