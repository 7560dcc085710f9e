"""
sesctl: manage Amazon SES email templates from the command line.

Lists, inspects, creates, updates and deletes SES v2 email templates and
sends templated test emails.
"""

__version__ = "0.1.0"
