"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (settings storage, wiki server HTTP).
"""
