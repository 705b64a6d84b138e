"""
Tests for sensitive value masking.
"""

from __future__ import annotations

import pytest

from bruno_xray.util.security import MaskStrategy, mask_sensitive_values


class TestMaskSensitiveValues:
    """Tests for mask_sensitive_values()."""

    def test_keep_first_last_is_default(self) -> None:
        assert mask_sensitive_values("my name is secret", ["secret"]) == "my name is s****t"

    def test_all_stars(self) -> None:
        masked = mask_sensitive_values("token=abc123", ["abc123"], MaskStrategy.ALL_STARS)
        assert masked == "token=******"

    def test_all_occurrences_replaced(self) -> None:
        masked = mask_sensitive_values("secret secret secret", ["secret"])
        assert masked == "s****t s****t s****t"

    @pytest.mark.parametrize("value, expected", [("a", "*"), ("ab", "**")])
    def test_short_values_fully_masked(self, value: str, expected: str) -> None:
        assert mask_sensitive_values(f"x{value}x", [value]) == f"x{expected}x"

    def test_longer_secret_masked_first(self) -> None:
        """A secret containing another secret is masked as a whole."""
        content = "hello my name is secret, and this secretName one is secret too"
        masked = mask_sensitive_values(content, ["secret", "secretName"])
        assert masked == "hello my name is s****t, and this s********e one is s****t too"

    def test_order_of_input_does_not_matter(self) -> None:
        content = "user secretName has secret"
        assert mask_sensitive_values(content, ["secret", "secretName"]) == \
            mask_sensitive_values(content, ["secretName", "secret"])

    def test_empty_values_ignored(self) -> None:
        assert mask_sensitive_values("nothing to hide", ["", ""]) == "nothing to hide"

    def test_no_values(self) -> None:
        assert mask_sensitive_values("nothing to hide", []) == "nothing to hide"

    def test_masked_text_never_contains_secret(self) -> None:
        secret = "p4ssw0rd"
        masked = mask_sensitive_values(f'{{"password": "{secret}"}}', [secret])
        assert secret not in masked
        assert '"p******d"' in masked
