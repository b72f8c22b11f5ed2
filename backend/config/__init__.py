"""Configuration package for ClassCheck."""
import os
from typing import Type

from .development import DevelopmentConfig
from .production import ProductionConfig
from .testing import TestingConfig

ENV_VAR = 'CLASSCHECK_ENV'

config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def current_env(fallback: str = 'default') -> str:
    """Environment name from CLASSCHECK_ENV, then the legacy FLASK_ENV."""
    return os.getenv(ENV_VAR) or os.getenv('FLASK_ENV') or fallback

def get_config(config_name: str = None) -> Type:
    """Config class for ``config_name``; unknown names get development."""
    if config_name is None:
        config_name = current_env()
    
    return config_map.get(config_name, config_map['default'])
