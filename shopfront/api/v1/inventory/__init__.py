"""API v1 inventory endpoints"""
