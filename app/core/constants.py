"""
Service identity constants
"""

SERVICE_NAME = "hr-records-backend"
DEFAULT_VERSION = "1.0.0"
