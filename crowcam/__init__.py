# =============================================================================
# CrowCam Token Preparation
# =============================================================================
"""
One-time OAuth setup for the CrowCam YouTube cleanup job.

Subpackages:
- crowcam.auth: authorization flow, token endpoint calls, token file I/O
"""

__version__ = "1.0.0"
