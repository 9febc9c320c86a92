"""
Accounts service for the community council administration portal.

Council members register an administrative account, log in with their
username and password, and can recover access on their own by answering the
security question they chose at registration.
"""
