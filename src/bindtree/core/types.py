"""
Core type definitions for bindtree.

This module contains fundamental type aliases used throughout bindtree for
type safety and consistency.
"""

from typing import Any

TreeValue = str | int | float | bool | list | dict | None

ResolveResult = tuple[Any, str | None]
