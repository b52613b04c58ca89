"""
Tests for short code generation.
"""

import pytest

from shortlink.core.exceptions import RandomSourceUnavailable
from shortlink.services import code_generator
from shortlink.services.code_generator import SHORT_CODE_ALPHABET, generate_short_code


class TestGenerateShortCode:
    """Test length, alphabet and failure handling of the generator."""

    @pytest.mark.parametrize("length", [1, 2, 3, 6, 7, 10, 32])
    def test_exact_length(self, length):
        """Codes are exactly as long as requested."""
        for _ in range(50):
            assert len(generate_short_code(length)) == length

    def test_url_safe_alphabet(self):
        """Codes only use [A-Za-z0-9-_] and never carry base64 padding."""
        allowed = set(SHORT_CODE_ALPHABET)
        for _ in range(500):
            code = generate_short_code(6)
            assert set(code) <= allowed
            assert "=" not in code

    def test_codes_are_random(self):
        """Repeated calls do not produce the same code."""
        codes = {generate_short_code(6) for _ in range(200)}
        assert len(codes) == 200

    @pytest.mark.parametrize("length", [0, -1])
    def test_rejects_non_positive_length(self, length):
        with pytest.raises(ValueError):
            generate_short_code(length)

    def test_random_source_failure_raises(self, monkeypatch):
        """A failing entropy source is an error, never an empty code."""
        def broken_token_bytes(n):
            raise OSError("getrandom failed")

        monkeypatch.setattr(code_generator, "token_bytes", broken_token_bytes)

        with pytest.raises(RandomSourceUnavailable) as exc_info:
            generate_short_code(6)
        assert isinstance(exc_info.value.original_error, OSError)
        assert exc_info.value.status_code == 500
