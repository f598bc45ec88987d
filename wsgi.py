#!/usr/bin/env python3
"""
WSGI entry point for the Account Tracker application.
Point gunicorn or uWSGI at ``wsgi:application``.
"""

from app import create_app

application = create_app()

if __name__ == "__main__":
    application.run()
