#!/usr/bin/env python3
"""
Start the Celery worker that runs reschedules and ETA refreshes
"""

import sys
from autoschedule.celery_app import celery_app

if __name__ == "__main__":
    print("Starting Celery Worker for Autoschedule...")
    print("Press Ctrl+C to stop")

    try:
        celery_app.start(['worker', '--loglevel=info'])
    except KeyboardInterrupt:
        print("\nStopping Celery Worker...")
        sys.exit(0)
