"""Tests for configuration module"""
import os
import tempfile
from pathlib import Path
from unittest.mock import patch
import pytest
from pydantic import ValidationError

from config import Config, DEFAULT_ENDPOINT


class TestConfig:
    """Test configuration validation and parsing"""

    def test_default_config(self):
        """Test default configuration values"""
        config = Config()

        assert config.signalfx_endpoint == DEFAULT_ENDPOINT
        assert config.signalfx_token == ""
        assert config.metric_prefix == ""
        assert config.dimensions == {}
        assert config.flush_interval == 10.0
        assert config.request_timeout == 10.0
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_environment_override(self):
        """Test configuration override from environment variables"""
        env_vars = {
            "SIGNALFX_ENDPOINT": "http://localhost:9943/v2/datapoint",
            "SIGNALFX_TOKEN": "secret-token",
            "METRIC_PREFIX": "svc",
            "DIMENSIONS": "host=web-1,env=prod",
            "FLUSH_INTERVAL": "2.5",
            "LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env_vars):
            config = Config()

            assert config.signalfx_endpoint == "http://localhost:9943/v2/datapoint"
            assert config.signalfx_token == "secret-token"
            assert config.metric_prefix == "svc"
            assert config.dimensions == {"host": "web-1", "env": "prod"}
            assert config.flush_interval == 2.5
            assert config.log_level == "DEBUG"

    def test_empty_endpoint_uses_default(self):
        """Test that an empty endpoint falls back to the ingest default"""
        assert Config(signalfx_endpoint="").signalfx_endpoint == DEFAULT_ENDPOINT

        with patch.dict(os.environ, {"SIGNALFX_ENDPOINT": ""}):
            assert Config().signalfx_endpoint == DEFAULT_ENDPOINT

    def test_dimensions_parsing(self):
        """Test dimension string parsing skips malformed pairs"""
        config = Config(dimensions=" host = web-1 ,broken, app=api=v2")

        assert config.dimensions == {"host": "web-1", "app": "api=v2"}

    def test_dimensions_from_mapping(self):
        """Test dimensions can be passed as a mapping"""
        dimensions = {"region": "eu-west-1"}
        config = Config(dimensions=dimensions)

        assert config.dimensions == dimensions

    def test_validation_flush_interval(self):
        """Test validation of flush interval"""
        with patch.dict(os.environ, {"FLUSH_INTERVAL": "0"}):
            with pytest.raises(ValidationError):
                Config()

        with pytest.raises(ValidationError):
            Config(request_timeout=-1)

    def test_validation_log_level(self):
        """Test validation of log level"""
        with pytest.raises(ValidationError):
            Config(log_level="chatty")

    def test_config_is_immutable(self):
        """Test configuration cannot change after construction"""
        config = Config()

        with pytest.raises(ValidationError):
            config.metric_prefix = "other"

    def test_prefixed(self):
        """Test metric prefix application"""
        assert Config(metric_prefix="svc").prefixed("hits") == "svc.hits"
        assert Config().prefixed("hits") == "hits"

    def test_user_agent(self):
        """Test user agent built from service identity"""
        config = Config(service_name="billing", service_version="2.1.0")

        assert config.user_agent == "billing/2.1.0"

    def test_directory_creation(self):
        """Test that parent directories are created for the log file"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "subdir" / "test.log"

            with patch.dict(os.environ, {"LOG_FILE": str(log_file)}):
                config = Config()

                assert config.log_file == log_file
                assert log_file.parent.exists()
