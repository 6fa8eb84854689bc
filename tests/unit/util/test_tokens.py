"""Unit tests for refresh token helpers."""

from gatekeep.util.tokens import generate_refresh_token, hash_refresh_token


class TestRefreshTokenHelpers:
    """Tests for refresh token generation and hashing."""

    def test_generated_tokens_are_url_safe_and_unique(self):
        tokens = {generate_refresh_token() for _ in range(100)}

        assert len(tokens) == 100
        for token in tokens:
            assert len(token) == 43
            assert "=" not in token and "+" not in token and "/" not in token

    def test_hash_is_stable_hex_sha256(self):
        digest = hash_refresh_token("abc")

        assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        assert hash_refresh_token("abc") == digest
