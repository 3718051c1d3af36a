#!/usr/bin/env python3
# Copyright (c) 2025 [Harivatsa G A]. All rights reserved.
# This work is licensed under CC BY-NC-ND 4.0.
# https://creativecommons.org/licenses/by-nc-nd/4.0/
# Attribution required. Commercial use and modifications prohibited.
"""
Jenkins MCP Server

This server implements the Model Context Protocol (MCP) to give AI
assistants access to a Jenkins instance through its REST API, without
installing anything on the Jenkins side.
"""

from typing import Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP

from jenkins_mcp.clients.http_manager import HTTPManager
from jenkins_mcp.clients.jenkins_client import JenkinsClient
from jenkins_mcp.core.config import ClientConfig
from jenkins_mcp.core.constants import APP_DESCRIPTION, APP_NAME
from jenkins_mcp.services.job_service import JobService
from jenkins_mcp.services.log_service import LogService
from jenkins_mcp.services.scm_service import ScmService
from jenkins_mcp.services.test_report_service import TestReportService
from jenkins_mcp.tools import (
    register_core_tools,
    register_log_tools,
    register_report_tools,
    register_scm_tools,
)


def create_server(
    client_config: ClientConfig,
    http_manager: Optional[HTTPManager] = None
) -> FastMCP:
    """
    Create the MCP server with every Jenkins tool registered.

    Args:
        client_config: Jenkins connection settings
        http_manager: Transport override (None = real network)

    Returns:
        FastMCP server, ready for mcp.run("stdio") or mounting over HTTP

    Example:
        >>> mcp = create_server(config.client_config())
        >>> mcp.run("stdio")
    """
    client = JenkinsClient(client_config, http_manager=http_manager)

    mcp = FastMCP(APP_NAME, instructions=APP_DESCRIPTION)

    register_core_tools(mcp, JobService(client))
    register_log_tools(mcp, LogService(client))
    register_scm_tools(mcp, ScmService(client))
    register_report_tools(mcp, TestReportService(client))

    logger.debug(f"MCP server created for {client_config.base_url}")
    return mcp
