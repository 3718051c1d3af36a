#!/usr/bin/env python3
# Copyright (c) 2025 [Harivatsa G A]. All rights reserved.
# This work is licensed under CC BY-NC-ND 4.0.
# https://creativecommons.org/licenses/by-nc-nd/4.0/
# Attribution required. Commercial use and modifications prohibited.

"""
Jenkins MCP Server - Main Entry Point
"""

import argparse
import sys
from typing import List, Optional

import uvicorn
from dotenv import load_dotenv
from loguru import logger

from jenkins_mcp.core.config import Config
from jenkins_mcp.core.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    VALID_LOG_LEVELS,
    VALID_TRANSPORTS,
)
from jenkins_mcp.core.exceptions import ConfigurationError
from jenkins_mcp.core.logging_config import configure_logging_from_config, normalize_level, setup_logging
from jenkins_mcp.server import create_server

# Command-line flags and the configuration keys they override
CLI_CONFIG_KEYS = {
    'jenkins_url': 'jenkins.url',
    'jenkins_user': 'jenkins.user',
    'jenkins_token': 'jenkins.api_token',
    'log_level': 'logging.level',
    'timeout': 'jenkins.timeout',
    'max_retries': 'jenkins.max_retries',
    'retry_delay': 'jenkins.retry_delay',
    'transport': 'mcp_server.transport',
    'host': 'mcp_server.host',
    'port': 'mcp_server.port',
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} v{APP_VERSION} - Jenkins MCP Server"
    )

    parser.add_argument('--jenkins-url', type=str, default=None, help='Jenkins base URL (env: JENKINS_URL)')
    parser.add_argument('--jenkins-user', type=str, default=None, help='Jenkins username (env: JENKINS_USER)')
    parser.add_argument(
        '--jenkins-token',
        type=str,
        default=None,
        help='Jenkins API token (env: JENKINS_API_TOKEN)'
    )
    parser.add_argument(
        '--insecure',
        action='store_true',
        default=None,
        help='Skip TLS certificate verification (env: JENKINS_INSECURE)'
    )
    parser.add_argument(
        '--log-level',
        type=str.lower,
        choices=VALID_LOG_LEVELS,
        default=None,
        help='Logging level (env: LOG_LEVEL, default: info)'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Request timeout in seconds (env: JENKINS_TIMEOUT, default: 30)'
    )
    parser.add_argument(
        '--max-retries',
        type=int,
        default=None,
        help='Retries for transient failures (env: JENKINS_MAX_RETRIES, default: 3)'
    )
    parser.add_argument(
        '--retry-delay',
        type=float,
        default=None,
        help='Base retry delay in seconds (env: JENKINS_RETRY_DELAY, default: 1)'
    )
    parser.add_argument(
        '--transport',
        type=str.lower,
        choices=VALID_TRANSPORTS,
        default=None,
        help='MCP transport (env: MCP_TRANSPORT, default: stdio)'
    )
    parser.add_argument('--host', type=str, default=None, help='Host to bind to for http (env: MCP_HOST)')
    parser.add_argument('--port', type=int, default=None, help='Port to bind to for http (env: MCP_PORT)')
    parser.add_argument('--config', type=str, default=None, help='Path to configuration file')

    return parser.parse_args(argv)


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> None:
    """Copy the flags that were given on the command line into the configuration."""
    for attr, key_path in CLI_CONFIG_KEYS.items():
        value = getattr(args, attr, None)
        if value is not None:
            config.set(key_path, value)

    if args.insecure:
        config.set('jenkins.insecure', True)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    load_dotenv()

    try:
        config = Config(config_path=args.config)
        apply_cli_overrides(config, args)
        config.validate()
        client_config = config.client_config()
    except ConfigurationError as e:
        setup_logging(level="ERROR")
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    configure_logging_from_config(config)

    transport = config.transport

    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")
    logger.info(f"Jenkins: {client_config.base_url} (user: {client_config.user})")
    logger.info(f"Transport: {transport}")
    if not client_config.verify_ssl:
        logger.warning("TLS certificate verification is disabled")

    mcp = create_server(client_config)

    if transport == 'http':
        from jenkins_mcp.api.app import create_app

        host = config.get('mcp_server.host', default=DEFAULT_HTTP_HOST, expected_type=str)
        port = config.get('mcp_server.port', default=DEFAULT_HTTP_PORT, expected_type=int)
        logger.info(f"Listening on http://{host}:{port}/mcp")

        try:
            uvicorn.run(create_app(mcp), host=host, port=port, log_level=normalize_level(config.log_level).lower())
        except KeyboardInterrupt:
            logger.info("Server stopped by user")
    else:
        mcp.run(transport='stdio')


if __name__ == "__main__":
    main()
