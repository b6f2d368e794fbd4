#!/usr/bin/env python3
# File: config.py

"""
Configuration management module for the newspaper metadata helpers.

This module handles:
1. Default configuration settings for the object store and search index
2. Loading custom settings from configuration files
3. Overriding endpoints and credentials from the environment
4. Validation of configuration values
"""

import os
import json
import logging
import platform
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, asdict

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Environment variables that override file settings
ENV_OVERRIDES = {
    'FEDORA_URL': 'fedora_url',
    'FEDORA_USER': 'fedora_user',
    'FEDORA_PASSWORD': 'fedora_password',
    'SOLR_URL': 'solr_url',
}


@dataclass
class MetadataConfig:
    """Configuration settings for the newspaper metadata helpers."""

    # Object store settings
    fedora_url: str = "http://localhost:8080/fedora"
    """Base URL of the Fedora object store (without trailing slash)."""

    fedora_user: str = "fedoraAdmin"
    """User name for authenticating against the object store."""

    fedora_password: str = ""
    """Password for authenticating against the object store."""

    request_timeout: float = 30.0
    """Timeout in seconds passed to every HTTP request."""

    mods_datastream_id: str = "MODS"
    """Datastream holding the descriptive metadata document of an issue."""

    # Search index settings
    use_solr_for_issues: bool = False
    """List issues from the search index instead of the resource index."""

    solr_url: str = "http://localhost:8080/solr"
    """Base URL of the Solr core (without trailing slash)."""

    solr_parent_field: str = "RELS_EXT_isMemberOf_uri_ms"
    """Search index field holding the parent newspaper URI of an issue."""

    solr_date_field: str = "mods_originInfo_dateIssued_dt"
    """Search index field holding the issue date."""

    solr_sequence_field: str = "RELS_EXT_isSequenceNumber_literal_ms"
    """Search index field holding the issue sequence number."""

    solr_content_model_field: str = "RELS_EXT_hasModel_uri_ms"
    """Search index field holding the content model URI."""

    solr_label_field: str = "fgs_label_s"
    """Search index field holding the object label."""

    solr_identifier_field: str = "PID"
    """Search index field holding the object identifier."""

    solr_batch_size: int = 10000
    """Number of rows requested per search index page."""

    def __post_init__(self):
        """Normalise URLs."""
        self.fedora_url = self.fedora_url.rstrip('/')
        self.solr_url = self.solr_url.rstrip('/')

    def validate(self) -> List[str]:
        """
        Validate the configuration settings.

        Returns:
            List of validation error messages, or empty list if valid
        """
        errors = []

        if not self.fedora_url.startswith(('http://', 'https://')):
            errors.append(f"Invalid fedora_url: {self.fedora_url}. Must be an http(s) URL.")

        if self.use_solr_for_issues and not self.solr_url.startswith(('http://', 'https://')):
            errors.append(f"Invalid solr_url: {self.solr_url}. Must be an http(s) URL.")

        if self.request_timeout <= 0:
            errors.append(f"Invalid request_timeout: {self.request_timeout}. Must be positive.")

        if self.solr_batch_size <= 0:
            errors.append(f"Invalid solr_batch_size: {self.solr_batch_size}. Must be positive.")

        for name in ('solr_parent_field', 'solr_date_field', 'solr_sequence_field',
                     'solr_content_model_field', 'solr_label_field', 'solr_identifier_field',
                     'mods_datastream_id'):
            if not getattr(self, name):
                errors.append(f"Invalid {name}: must not be empty.")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'MetadataConfig':
        """Create configuration from dictionary."""
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__annotations__})


class ConfigManager:
    """
    Manages configuration settings for the newspaper metadata helpers.
    Handles loading, saving, and validating configuration.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_file: Path to a JSON configuration file, or None for the default location
        """
        self.config = MetadataConfig()
        self.config_file = config_file or self._get_default_config_path()

        if os.path.exists(self.config_file):
            try:
                self.load_config(self.config_file)
            except Exception as e:
                logger.warning(f"Failed to load config file: {e}")

        self.apply_environment()

    def _get_default_config_path(self) -> str:
        """Get the default path for the configuration file."""
        if platform.system() == "Windows":
            config_dir = os.path.join(os.environ.get("APPDATA", ""), "NewspaperMetadata")
        else:
            config_dir = os.path.join(os.path.expanduser("~"), ".config", "newspaper_metadata")

        return os.path.join(config_dir, "newspaper_metadata.json")

    def load_config(self, config_file: str) -> bool:
        """
        Load configuration from a JSON file.

        Args:
            config_file: Path to the configuration file

        Returns:
            True if successful, False otherwise
        """
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)

            self.config = MetadataConfig.from_dict(config_dict)
            self.config_file = config_file
            logger.info(f"Loaded configuration from {config_file}")
            return True

        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading configuration: {e}")
            return False

    def apply_environment(self) -> None:
        """Override endpoints and credentials from the environment (and a .env file)."""
        load_dotenv()
        for env_name, attribute in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                setattr(self.config, attribute, value)
        # Re-run normalisation on anything the environment replaced
        self.config.__post_init__()

    def save_config(self, config_file: Optional[str] = None) -> bool:
        """
        Save configuration to a JSON file.

        Args:
            config_file: Path to save the configuration file, or None to use current path

        Returns:
            True if successful, False otherwise
        """
        if config_file:
            self.config_file = config_file

        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.config_file)), exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config.to_dict(), f, indent=4)

            logger.info(f"Saved configuration to {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def validate_config(self) -> List[str]:
        """
        Validate the current configuration.

        Returns:
            List of validation error messages, or empty list if valid
        """
        return self.config.validate()

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self.config = MetadataConfig()


_config_manager: Optional[ConfigManager] = None


def get_config() -> MetadataConfig:
    """
    Get the current configuration, loading it on first use.

    Returns:
        Current configuration settings
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
