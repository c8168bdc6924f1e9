"""
Core utilities shared by the data layer.

This package provides:
- Application-level settings (separate from the DynamoDB settings in versa_data.db.config)
- Logging configuration with correlation/organization context
- The error hierarchy raised by the store, repositories and secret adapter
"""
