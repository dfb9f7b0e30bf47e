import hashlib

from recipe_ai_core.fingerprint import hash_bytes, hash_file


CORPUS = [
    b"",
    b"a",
    b"b",
    b"recipe",
    b"recipf",
    b"\x00" * 1024,
    b"\x00" * 1023 + b"\x01",
    bytes(range(256)),
]


def test_hash_is_deterministic():
    for data in CORPUS:
        assert hash_bytes(data) == hash_bytes(data)


def test_hash_differs_on_single_byte_change():
    digests = [hash_bytes(data) for data in CORPUS]
    assert len(set(digests)) == len(CORPUS)


def test_hash_is_lowercase_sha256_hex():
    digest = hash_bytes(b"CHICKEN SOUP")
    assert digest == hashlib.sha256(b"CHICKEN SOUP").hexdigest()
    assert len(digest) == 64
    assert digest == digest.lower()


def test_hash_file_matches_hash_bytes(tmp_path):
    data = bytes(range(256)) * 10_000  # más de un chunk
    path = tmp_path / "receta.pdf"
    path.write_bytes(data)
    assert hash_file(path) == hash_bytes(data)
