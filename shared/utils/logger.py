"""
Logging utilities for the VTU backend

Provides centralized logging configuration and utilities.
"""

import os
import copy
import logging
import logging.config
from typing import Optional, Dict, Any
import yaml

# Default logging configuration
DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'plain': {
            'format': '%(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console']
    },
    'loggers': {
        'vtu': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        }
    }
}


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a dictConfig mapping

    Args:
        config_path: Optional path to a YAML logging configuration

    Returns:
        The parsed configuration, or a copy of the default one
    """
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
            if isinstance(config, dict):
                return config
            logging.getLogger(__name__).warning(
                "Logging config %s is not a mapping, using defaults", config_path
            )
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning(
                "Failed to load logging config from %s: %s", config_path, e
            )

    return copy.deepcopy(DEFAULT_LOGGING_CONFIG)


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Setup logging configuration

    Args:
        config_path: Path to a YAML logging configuration file
        log_level: Override log level
        log_format: Override formatter ('default', 'detailed', 'plain')
    """
    config = load_logging_config(config_path)

    # Apply environment-specific overrides
    environment = os.getenv('ENVIRONMENT', 'development')
    env_config = config.pop(environment, None)
    if isinstance(env_config, dict):
        config.setdefault('handlers', {}).update(env_config.get('handlers', {}))
        config.setdefault('loggers', {}).update(env_config.get('loggers', {}))

    if log_level:
        log_level = log_level.upper()
        if isinstance(config.get('root'), dict):
            config['root']['level'] = log_level
        for logger_config in config.get('loggers', {}).values():
            logger_config['level'] = log_level
        for handler_config in config.get('handlers', {}).values():
            handler_config['level'] = log_level

    if log_format and log_format in config.get('formatters', {}):
        for handler_config in config.get('handlers', {}).values():
            handler_config['formatter'] = log_format

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        logging.basicConfig(
            level=getattr(logging, log_level or 'INFO', logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        logging.getLogger(__name__).warning("Failed to configure logging, using basicConfig: %s", e)


class RequestLogger:
    """Logger for HTTP requests"""

    def __init__(self, name: str = "vtu.requests"):
        self.logger = logging.getLogger(name)

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        response_time: float,
        ip_address: Optional[str] = None
    ):
        """Log HTTP request"""
        level = logging.ERROR if status_code >= 500 else logging.INFO
        self.logger.log(
            level,
            f"{method} {path} {status_code} {response_time:.3f}s",
            extra={
                'request_method': method,
                'request_path': path,
                'response_status': status_code,
                'response_time': response_time,
                'ip_address': ip_address,
                'event_type': 'http_request'
            }
        )


def get_request_logger() -> RequestLogger:
    """Get request logger instance"""
    return RequestLogger()
