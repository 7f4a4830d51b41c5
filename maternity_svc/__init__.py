"""
Maternity health service: pregnancy health records and clinician notifications.
"""
__version__ = "1.0.0"
