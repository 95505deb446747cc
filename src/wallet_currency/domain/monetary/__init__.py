"""Monetary domain package.

This package contains the `Currency` value object, its immutable configuration, income types and
the exact display <-> minor unit conversion and exchange engine.
"""
