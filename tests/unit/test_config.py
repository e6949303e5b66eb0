"""
Tests for configuration and environment variables.
"""
import pytest
import os
from vorbiscomment.utils import Config

ENV_VARS = ['VORBISCOMMENT_BINARY', 'VORBISCOMMENT_TIMEOUT', 'VORBISCOMMENT_ENCODING', 'VORBISCOMMENT_VERBOSE']


class TestConfig:
    """Tests for Config class and environment variables."""

    def teardown_method(self):
        """Clean up env vars."""
        for var in ENV_VARS:
            if var in os.environ:
                del os.environ[var]

    def test_defaults(self):
        assert Config.BINARY == '/usr/bin/vorbiscomment'
        assert Config.TIMEOUT is None
        assert Config.ENCODING == 'utf-8'

    def test_binary_env_var(self):
        os.environ['VORBISCOMMENT_BINARY'] = '/opt/vorbis-tools/bin/vorbiscomment'
        Config.load_from_env()
        assert Config.BINARY == '/opt/vorbis-tools/bin/vorbiscomment'

    def test_timeout_env_var(self):
        os.environ['VORBISCOMMENT_TIMEOUT'] = '2.5'
        Config.load_from_env()
        assert Config.TIMEOUT == 2.5

    def test_timeout_env_var_not_a_number(self):
        os.environ['VORBISCOMMENT_TIMEOUT'] = 'soon'
        with pytest.raises(ValueError):
            Config.load_from_env()

    def test_verbose_env_var_variants(self):
        """Test various VORBISCOMMENT_VERBOSE values."""
        variants = [
            ('1', True), ('true', True), ('TRUE', True), ('yes', True),
            ('0', False), ('false', False), ('no', False), ('invalid', False), ('', False)
        ]

        for val, expected in variants:
            os.environ['VORBISCOMMENT_VERBOSE'] = val
            Config.DEFAULT_VERBOSE = False
            Config.load_from_env()
            assert Config.DEFAULT_VERBOSE is expected, f"Failed for value: {val}"

    # --- Validation Tests ---

    def test_validate_accepts_valid(self):
        Config.TIMEOUT = 10
        Config.validate()

    def test_validate_rejects_non_positive_timeout(self):
        Config.TIMEOUT = 0
        with pytest.raises(ValueError, match="TIMEOUT"):
            Config.validate()

    def test_validate_rejects_empty_binary(self):
        Config.BINARY = ''
        with pytest.raises(ValueError, match="BINARY"):
            Config.validate()

    def test_validate_rejects_unknown_encoding(self):
        Config.ENCODING = 'no-such-codec'
        with pytest.raises(ValueError, match="ENCODING"):
            Config.validate()
