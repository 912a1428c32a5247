"""Team registration form processing.

The form layer converts a WordPress form-plugin webhook message into a validated `Submission` and
persists it, together with its teams, under a fresh 6-digit subscription number.
"""
