"""Monetary domain package.

This package contains the `MonetaryAmount` value object and the helpers that turn
loosely-typed document values into exact integer minor units, without ever going
through binary floating point.
"""
