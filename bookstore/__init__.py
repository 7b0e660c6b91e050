"""
Bookstore catalog web application.

A small FastAPI service that renders a searchable, sortable product
catalogue. Products are cached in a durable key-value slot on disk and
seeded from a remote (or packaged) JSON list on first use.
"""
