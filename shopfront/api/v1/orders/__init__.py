"""API v1 order endpoints"""
