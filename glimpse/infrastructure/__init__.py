# Infrastructure layer - document store, object storage, identity provider
"""
Infrastructure layer contains:
- Document store backends
- Object storage adapters
- Identity provider
- Collection repositories
"""
