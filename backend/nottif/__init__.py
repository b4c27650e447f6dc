"""
Nottif - webhook notification service with cron jobs and a live event log.
"""
__version__ = "0.1.0"
