"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Namespace storage backend (S3/MinIO/R2), one bucket per principal

Keep infrastructure concerns separate from business logic.
"""
