#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a JVC D-ILA projector.
"""

from __future__ import annotations

from fastapi import FastAPI

import os
import json

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    JvcDlaClient,
    JvcDlaMonitor,
    JvcDlaClientConfig,
  )

from .api import router as api_router

def load_raw_config() -> JsonableDict:
    """Loads the server configuration file named by JVC_DLA_CONFIG, or
       ./jvc_dla_config.json if it exists. Returns {} if there is none."""
    config_file = os.environ.get("JVC_DLA_CONFIG", None)
    if config_file is None:
        if os.path.exists("jvc_dla_config.json"):
            config_file = "jvc_dla_config.json"
    if config_file is None:
        return {}
    with open(config_file, "r") as f:
        raw_config: JsonableDict = json.load(f)
    return raw_config

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    logger.info("Projector REST server starting up--initializing...")
    raw_config = load_raw_config()
    app.state.raw_config = raw_config
    dla_config = JvcDlaClientConfig.from_jsonable(raw_config)
    app.state.dla_config = dla_config
    monitor = JvcDlaMonitor(JvcDlaClient(config=dla_config))
    app.state.monitor = monitor
    monitor.start()
    logger.info(f"Serving API for projector at {dla_config.default_host}...")
    try:
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")
        await monitor.stop()
        monitor.client.disconnect()
        app.state.monitor = None

dla_api = FastAPI(lifespan=fastapi_lifetime)
dla_api.include_router(api_router)

def get_monitor() -> JvcDlaMonitor:
    return dla_api.state.monitor

def get_dla_config() -> JvcDlaClientConfig:
    return dla_api.state.dla_config

def get_raw_config() -> JsonableDict:
    return dla_api.state.raw_config
