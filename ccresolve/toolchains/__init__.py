# SPDX-License-Identifier: MIT
"""Compiler-specific knowledge (wrapper dispatch, target queries)."""
