"""Jobly: job-board API for users, companies and jobs."""

__version__ = "1.0.0"
