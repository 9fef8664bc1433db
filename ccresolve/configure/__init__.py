# SPDX-License-Identifier: MIT
"""Configuration of the resolution engine."""
