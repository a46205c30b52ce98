"""
bucketmirror — one-way mirror of a local file tree into an S3 bucket.

Uploads new or changed files, performs metadata/ACL-only updates when
bytes are unchanged, installs website redirect markers, and removes
remote objects that no longer correspond to a local file.
"""

__version__ = "1.0.0"
