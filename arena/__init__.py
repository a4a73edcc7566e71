"""Relativistic two-fighter arena."""
from __future__ import annotations
