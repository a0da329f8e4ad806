"""
NGINX Service Mesh Adapter - Capability Registration

Keeps the orchestration server informed of what this adapter can deploy.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- All communication through defined interfaces

Modules:
- releases: Latest mesh version discovery
- charts: Helm chart and bundle location
- registration: Extraction rules, static and dynamic registration
- scheduler: Periodic re-registration
"""

__version__ = "1.0.0"
