"""Celery tasks for scheduled maintenance."""
