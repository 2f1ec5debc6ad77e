"""Catalog and identity service operations."""
