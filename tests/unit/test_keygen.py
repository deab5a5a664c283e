"""Tests for keygen.generator — license keys, API keys and masking."""

from tenantgate.keygen.generator import (
    API_KEY_PATTERN,
    GROUP_COUNT,
    LICENSE_KEY_PATTERN,
    generate_api_key,
    generate_license_key,
    is_license_key_format,
    mask_secret,
)


class TestGenerateLicenseKey:
    def test_matches_pattern(self):
        key = generate_license_key()
        assert LICENSE_KEY_PATTERN.match(key)

    def test_prefix_and_groups(self):
        parts = generate_license_key().split("-")
        assert parts[0] == "LIC"
        assert len(parts) == 1 + GROUP_COUNT == 7
        assert all(len(p) == 4 for p in parts[1:])

    def test_uppercase_hex(self):
        body = generate_license_key()[4:].replace("-", "")
        assert len(body) == 24
        assert body == body.upper()
        int(body, 16)

    def test_uniqueness(self):
        keys = {generate_license_key() for _ in range(200)}
        assert len(keys) == 200


class TestGenerateApiKey:
    def test_length_and_charset(self):
        key = generate_api_key()
        assert len(key) == 64
        assert API_KEY_PATTERN.match(key)

    def test_uniqueness(self):
        assert generate_api_key() != generate_api_key()


class TestLicenseKeyFormat:
    def test_generated_key_is_valid(self):
        assert is_license_key_format(generate_license_key())

    def test_lowercase_rejected(self):
        assert not is_license_key_format(generate_license_key().lower())

    def test_wrong_group_count(self):
        assert not is_license_key_format("LIC-AAAA-BBBB-CCCC")

    def test_empty(self):
        assert not is_license_key_format("")


class TestMaskSecret:
    def test_keeps_prefix(self):
        assert mask_secret("abcdef0123456789") == "abcdef01..."

    def test_custom_visible(self):
        assert mask_secret("LIC-1234-5678-9ABC", visible=10) == "LIC-1234-5..."

    def test_short_value_fully_masked(self):
        assert mask_secret("abc") == "***"

    def test_none_passthrough(self):
        assert mask_secret(None) is None
