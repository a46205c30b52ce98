"""Utility modules for bucketmirror."""
