"""
Live shows: public listing and admin writes.
"""
