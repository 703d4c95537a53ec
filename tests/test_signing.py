"""Tests for request signing."""

from __future__ import annotations

import hashlib
import hmac
from unittest.mock import patch

import pytest

from pyecoflow.const import (
    SELF_TEST_ACCESS_KEY,
    SELF_TEST_NONCE,
    SELF_TEST_PARAMS,
    SELF_TEST_SECRET_KEY,
    SELF_TEST_SIGNATURE,
    SELF_TEST_TIMESTAMP,
)
from pyecoflow.models import Credentials
from pyecoflow.signing import (
    canonical_string,
    current_timestamp,
    generate_nonce,
    sign,
    signature_headers,
)


class TestCanonicalString:
    """Test canonical_string function."""

    def test_documented_example(self) -> None:
        """Test the canonical string of the documented signing example."""
        result = canonical_string(
            SELF_TEST_PARAMS, SELF_TEST_ACCESS_KEY, SELF_TEST_TIMESTAMP, SELF_TEST_NONCE
        )

        assert result == (
            "params.cmdSet=11&params.eps=0&params.id=24&sn=123456789"
            "&accessKey=Fp4SvIprYSDPXtYJidEtUAd1o&nonce=345164&timestamp=1671171709428"
        )

    def test_params_are_sorted_by_key(self) -> None:
        """Test that parameters are sorted regardless of input order."""
        params = [("sn", "SN1"), ("id", "5"), ("operateType", "powerMode")]

        result = canonical_string(params, "ak", 1, "123456")

        assert result.startswith("id=5&operateType=powerMode&sn=SN1&")

    def test_sort_is_codepoint_ordered(self) -> None:
        """Test that uppercase keys sort before lowercase keys."""
        params = [("moduleType", "1"), ("Zeta", "z"), ("id", "1")]

        result = canonical_string(params, "ak", 1, "123456")

        assert result.startswith("Zeta=z&id=1&moduleType=1&")

    def test_duplicate_keys_keep_relative_order(self) -> None:
        """Test that duplicate keys are neither merged nor reordered."""
        params = [("b", "2"), ("a", "second"), ("a", "first")]

        result = canonical_string(params, "ak", 1, "123456")

        assert result.startswith("a=second&a=first&b=2&")

    def test_empty_params_has_no_leading_separator(self) -> None:
        """Test that the suffix alone is signed when there are no parameters."""
        result = canonical_string([], "ak", 1671171709428, "345164")

        assert result == "accessKey=ak&nonce=345164&timestamp=1671171709428"

    def test_values_are_percent_encoded(self) -> None:
        """Test that reserved characters in keys and values are encoded."""
        params = [("name", "Living Room&Co"), ("path", "a/b=c")]

        result = canonical_string(params, "ak", 1, "123456")

        assert result.startswith("name=Living%20Room%26Co&path=a%2Fb%3Dc&")

    def test_unicode_values_are_utf8_encoded(self) -> None:
        """Test that non-ASCII values are percent-encoded as UTF-8."""
        result = canonical_string([("name", "Küche")], "ak", 1, "123456")

        assert result.startswith("name=K%C3%BCche&")

    def test_tilde_is_encoded_and_asterisk_is_literal(self) -> None:
        """Test that "~" is escaped while "*" stays literal."""
        result = canonical_string([("k", "a~b*c")], "ak", 1, "123456")

        assert result == "k=a%7Eb*c&accessKey=ak&nonce=123456&timestamp=1"

    @pytest.mark.parametrize(
        ("value", "encoded"),
        [
            ("a+b", "a%2Bb"),
            ("a b", "a%20b"),
            ("it's", "it%27s"),
            ("-._", "-._"),
        ],
    )
    def test_query_component_encoding(self, value: str, encoded: str) -> None:
        """Test the literal and escaped characters of parameter values."""
        result = canonical_string([("k", value)], "ak", 1, "123456")

        assert result == f"k={encoded}&accessKey=ak&nonce=123456&timestamp=1"

    def test_keys_use_the_same_encoding(self) -> None:
        """Test that keys are escaped like values."""
        result = canonical_string([("a~*", "1")], "ak", 1, "123456")

        assert result.startswith("a%7E*=1&")

    def test_suffix_is_not_sorted(self) -> None:
        """Test that the credential suffix keeps its fixed order."""
        result = canonical_string([("zz", "1")], "ak", 1, "123456")

        assert result == "zz=1&accessKey=ak&nonce=123456&timestamp=1"


class TestSign:
    """Test sign function."""

    def test_documented_example_signature(self) -> None:
        """Test that the documented example produces the documented signature."""
        signature = sign(
            SELF_TEST_PARAMS,
            SELF_TEST_ACCESS_KEY,
            SELF_TEST_SECRET_KEY,
            SELF_TEST_TIMESTAMP,
            SELF_TEST_NONCE,
        )

        assert signature == SELF_TEST_SIGNATURE

    def test_signature_is_lowercase_hex_sha256(self) -> None:
        """Test signature format."""
        signature = sign([("sn", "SN1")], "ak", "sk", 1, "123456")

        assert len(signature) == 64
        assert signature == signature.lower()
        int(signature, 16)

    def test_signature_matches_hmac_of_canonical_string(self) -> None:
        """Test that the signature is HMAC-SHA256 over the canonical string."""
        params = [("sn", "SN1"), ("id", "7")]
        expected = hmac.new(
            b"secret",
            canonical_string(params, "ak", 42, "654321").encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        assert sign(params, "ak", "secret", 42, "654321") == expected

    def test_signing_is_deterministic(self) -> None:
        """Test that identical inputs sign identically."""
        params = [("sn", "SN1"), ("id", "7"), ("version", "1.0")]

        first = sign(params, "ak", "sk", 1671171709428, "345164")
        second = sign(list(reversed(params)), "ak", "sk", 1671171709428, "345164")

        assert first == second

    def test_different_secret_changes_signature(self) -> None:
        """Test that the secret key is part of the signature."""
        first = sign([], "ak", "secret-one", 1, "123456")
        second = sign([], "ak", "secret-two", 1, "123456")

        assert first != second


class TestSignatureHeaders:
    """Test signature_headers function."""

    def test_fixed_nonce_and_timestamp(self) -> None:
        """Test headers built from fixed nonce and timestamp."""
        credentials = Credentials(access_key=SELF_TEST_ACCESS_KEY, secret_key=SELF_TEST_SECRET_KEY)

        headers = signature_headers(
            SELF_TEST_PARAMS,
            credentials,
            timestamp=SELF_TEST_TIMESTAMP,
            nonce=SELF_TEST_NONCE,
        )

        assert headers == {
            "accessKey": SELF_TEST_ACCESS_KEY,
            "nonce": SELF_TEST_NONCE,
            "timestamp": str(SELF_TEST_TIMESTAMP),
            "sign": SELF_TEST_SIGNATURE,
        }

    def test_generated_nonce_and_timestamp_match_signature(self) -> None:
        """Test that generated nonce and timestamp are the ones signed."""
        credentials = Credentials(access_key="ak", secret_key="sk")
        params = [("sn", "SN1")]

        headers = signature_headers(params, credentials)

        expected = sign(params, "ak", "sk", int(headers["timestamp"]), headers["nonce"])
        assert headers["sign"] == expected

    def test_secret_key_is_not_sent(self) -> None:
        """Test that the secret key does not appear in any header."""
        credentials = Credentials(access_key="ak", secret_key="very-secret")

        headers = signature_headers([], credentials)

        assert "very-secret" not in headers.values()


class TestNonceAndTimestamp:
    """Test nonce and timestamp generation."""

    def test_nonce_is_six_digits(self) -> None:
        """Test nonce format over several draws."""
        for _ in range(50):
            nonce = generate_nonce()
            assert len(nonce) == 6
            assert nonce.isdigit()

    def test_nonce_bounds(self) -> None:
        """Test that nonce generation uses the 6-digit range."""
        with patch("pyecoflow.signing.random.randint", return_value=100000) as randint:
            assert generate_nonce() == "100000"

        randint.assert_called_once_with(100000, 999999)

    def test_timestamp_is_epoch_milliseconds(self) -> None:
        """Test timestamp resolution."""
        with patch("pyecoflow.signing.time.time_ns", return_value=1_671_171_709_428_123_456):
            assert current_timestamp() == 1671171709428
