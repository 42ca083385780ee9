"""
Backend Scripts Module

Utility scripts for database operations.

Available scripts:
    - seed_data.py: Creates and publishes sample job posts for local testing

Usage:
    python -m scripts.seed_data
"""
