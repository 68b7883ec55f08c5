"""Gainsly API - Services Package."""
