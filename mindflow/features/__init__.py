"""
Features Module - Self-contained feature units.

- journaling: entry analysis lifecycle, session store and dashboard
"""
