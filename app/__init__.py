"""
Clinic Scheduling API

REST backend for a clinic: JWT authentication, user administration,
appointment and exam booking with per-doctor slot reservation, exam
results and a push-notification device registry.
"""

__version__ = "1.0.0"
