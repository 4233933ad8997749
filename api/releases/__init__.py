"""
Releases and their listening links.
"""
