# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Automatically-managed version string for jvc_dla"""

__version__ = "1.0.0"
