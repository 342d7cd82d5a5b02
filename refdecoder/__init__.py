"""Decode vendor product reference codes using category definition files."""
