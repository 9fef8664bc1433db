# SPDX-License-Identifier: MIT
"""Core resolution engine: commands, layers, and change events."""
