"""Catalog API: product catalog service with image attachment."""
