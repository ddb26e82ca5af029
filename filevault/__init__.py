"""
filevault

File lifecycle management with deduplicated uploads and single-use,
time-bounded download links.
"""

__version__ = "1.0.0"
