"""Task Tracker package.

Organized by feature modules (users, comments, chats, reports, ...) with a thin
Flask controller layer over service/repository layers. The ``client`` package
holds the HTTP wrappers and the worker chat feed used by front ends.
"""
