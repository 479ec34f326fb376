"""Shopfront order-fulfillment service"""
