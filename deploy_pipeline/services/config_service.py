"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from ..api.exceptions import ConfigError
from ..constants import DEFAULT_CONFIG_FILE, ENV_CONFIG_PATH
from ..models.config import PipelineConfig

logger = logging.getLogger(__name__)

_COMMAND = {"type": "string", "minLength": 1}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "source": {
            "type": "object",
            "properties": {
                "type": {"enum": ["file", "database"]},
                "path": {"type": "string"},
                "connection_env": {"type": "string", "minLength": 1}
            },
            "additionalProperties": False
        },
        "eligibility": {"enum": ["flag", "marker"]},
        "marker_file": {"type": "string", "minLength": 1},
        "dependency_manifest": {"type": "string", "minLength": 1},
        "timeout": {"type": "number", "minimum": 0},
        "post_deploy_cwd": {"enum": ["project", "inherit"]},
        "commands": {
            "type": "object",
            "properties": {
                "pull": _COMMAND,
                "build": _COMMAND,
                "publish": _COMMAND,
                "install": _COMMAND
            },
            "additionalProperties": False
        },
        "notification": {
            "type": "object",
            "properties": {
                "type": {"enum": ["telegram", "log", "none"]},
                "token_env": {"type": "string"},
                "chat_id_env": {"type": "string"},
                "template": {"type": "string"}
            },
            "additionalProperties": False
        },
        "report": {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "open": {"type": "boolean"}
            },
            "additionalProperties": False
        },
        "logging": {
            "type": "object",
            "properties": {
                "database": {"type": "boolean"}
            },
            "additionalProperties": False
        }
    },
    "additionalProperties": False
}


class ConfigService:
    """Locate, parse and validate the deploy-pipeline configuration"""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Explicit configuration file; falls back to
                ``$DEPLOY_PIPELINE_CONFIG`` and then ``deploy-pipeline.yaml``
                in the working directory
        """
        self.config_path = self.locate(config_path)

    @staticmethod
    def locate(config_path: Optional[Path] = None) -> Path:
        """Resolve which configuration file to load"""
        if config_path is not None:
            return Path(config_path)

        env_path = os.environ.get(ENV_CONFIG_PATH)
        if env_path:
            return Path(env_path)

        return Path.cwd() / DEFAULT_CONFIG_FILE

    def load_config(self) -> PipelineConfig:
        """
        Load configuration from file

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        data = self.read()
        self.validate(data)

        try:
            config = PipelineConfig.from_dict(data, base_dir=self.config_path.parent.resolve())
        except ValueError as e:
            raise ConfigError(f"Invalid configuration {self.config_path}: {e}")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return config

    def read(self) -> Dict[str, Any]:
        """Read the file, expanding environment variables before parsing"""
        if not self.config_path.is_file():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Unable to read configuration {self.config_path}: {e}")

        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Unable to parse configuration {self.config_path}: {e}")

        # an empty file means all defaults
        return data or {}

    def validate(self, data: Dict[str, Any]) -> None:
        """Validate against the configuration schema"""
        try:
            jsonschema.validate(data, CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.path) or "configuration"
            raise ConfigError(f"Invalid configuration {self.config_path}: {location}: {e.message}")
