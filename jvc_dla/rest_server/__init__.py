# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a JVC D-ILA projector.
"""
from .app import dla_api, get_monitor, get_dla_config, get_raw_config
