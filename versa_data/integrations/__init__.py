"""
Adapters to AWS services other than the single table.

- org_secrets: per-organization secret bundle in AWS Secrets Manager
"""

from .org_secrets import OrganizationSecrets  # noqa: F401
