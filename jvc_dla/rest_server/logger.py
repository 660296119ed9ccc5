#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Logging for the JVC D-ILA projector REST server.
"""

from __future__ import annotations

import logging

logger = logging.getLogger('jvc_dla.rest_server')
