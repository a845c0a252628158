"""Volunteer activity and application management service."""
