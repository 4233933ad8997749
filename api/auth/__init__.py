"""
Login, bearer-token verification and the admin guard.
"""
