"""API v1 cart endpoints"""
