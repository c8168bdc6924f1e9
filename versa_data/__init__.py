"""
Data access layer for the Versa field-service platform.

All records of every kind live in one DynamoDB table. This package provides:
- A registry describing how each record kind is keyed and indexed (db.keys)
- A store client that speaks only in those keys (db.store)
- Typed repositories per record kind, scoped by organization (repositories)
- A per-organization secret bundle in AWS Secrets Manager (integrations)
"""

__version__ = "0.1.0"
