"""Config-based dataset discovery.

This module resolves job settings, gathers tagged candidates, and
reduces them to the leaf dataset locations a job should process.
"""
