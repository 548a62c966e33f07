"""
Use Cases

Organized into domain folders:
- auth/: Login and logout, the main producers of audit events
- audit/: Audit ledger queries, export and retention
"""
