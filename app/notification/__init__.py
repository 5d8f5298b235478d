"""Notification package.

Runs the daily document-expiry sweep: decides which documents are due for
a reminder, resolves the opted-in recipients per company, renders the
company's template (or the built-in default) and delivers via SMTP.
"""
