#!/usr/bin/env python3
"""
Start Celery Beat for the hourly ETA refresh
"""

import sys
from autoschedule.celery_app import celery_app

if __name__ == "__main__":
    print("Starting Celery Beat for Autoschedule...")
    print("Press Ctrl+C to stop")

    try:
        celery_app.start(['beat', '--loglevel=info'])
    except KeyboardInterrupt:
        print("\nStopping Celery Beat...")
        sys.exit(0)
