"""Crate registry API package."""
