"""
Super Admin Console Service

Backend for the operator dashboard of the multi-tenant SaaS product:
- Organization browsing and details
- Per-organization feature flags
- Support ticket review
- Application error log inspection
- Organization deprovisioning (cascading delete across identity accounts
  and relational records)
"""

__version__ = "1.0.0"
