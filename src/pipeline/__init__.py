"""Declarative pipelines over in-memory sequences.

This package composes filter, map, sort and reduce stages over a source
and evaluates them into a single terminal result.
"""
