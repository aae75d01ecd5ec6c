"""Business logic layer for files app.

This package contains all business logic for namespaces:
- Namespace provisioning for newly registered principals
- Listing the objects a principal may see
- The registration flow tying identity and provisioning together

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
