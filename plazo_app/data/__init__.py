"""
Record ingestion module.

Canonical operation and financing records, and the adapter that builds them
from raw CSV or broker rows.
"""
