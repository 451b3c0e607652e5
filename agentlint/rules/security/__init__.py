"""
Security rules: leaked credentials, dynamic code execution, SQL
injection and overly permissive settings.
"""
