"""API v1 product endpoints"""
