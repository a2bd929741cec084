"""Config store access layer.

This module reads versioned tag hierarchies from local or S3 stores.
It answers imported-by and resolved-config queries for the finder.
"""
