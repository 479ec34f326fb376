"""Core infrastructure: configuration, persistence, security, observability"""
