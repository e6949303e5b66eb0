"""
Tests for logging setup.
"""
import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from vorbiscomment.utils import setup_logging


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_creates_rotating_log(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch('vorbiscomment.utils.logging.basicConfig') as basic_config:
            setup_logging(verbose=True)

        assert (tmp_path / 'logs').is_dir()
        kwargs = basic_config.call_args[1]
        assert kwargs['level'] == logging.DEBUG
        file_handlers = [h for h in kwargs['handlers'] if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename.endswith('vorbiscomment.log')
        assert file_handlers[0].backupCount == 5
        file_handlers[0].close()

    def test_default_level_is_info(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch('vorbiscomment.utils.logging.basicConfig') as basic_config:
            setup_logging()
        assert basic_config.call_args[1]['level'] == logging.INFO
        for handler in basic_config.call_args[1]['handlers']:
            if isinstance(handler, RotatingFileHandler):
                handler.close()
