"""
Pytest configuration for unit tests.
"""
import pytest
import sys
import os

# Ensure project root is in python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Mock pyodbc globally before any application imports
from unittest.mock import MagicMock
sys.modules["pyodbc"] = MagicMock()

@pytest.fixture
def connector_config():
    """Default connector configuration (no YAML, no env overrides)."""
    from config.configuration import ConnectorConfig
    return ConnectorConfig()

@pytest.fixture
def builder():
    from services.infrastructure.connection_string_builder import ConnectionStringBuilder
    return ConnectionStringBuilder()
