"""
Backend package for the Daily Belfast News site.

This package provides a FastAPI application over pluggable table and
object-storage backends: readers browse published posts, signed-in authors
publish posts with tags and a featured image, and administrators moderate.
"""
