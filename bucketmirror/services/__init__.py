"""
Services for bucketmirror.
"""
