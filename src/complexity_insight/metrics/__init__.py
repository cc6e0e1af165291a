"""Snippet-level metrics, weighted comparison and text reports."""
