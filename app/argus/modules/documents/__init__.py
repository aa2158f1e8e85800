"""
Document library.

- Admins upload files; logged-in users list and download them
- Files live under UPLOADS_PATH with server-generated names
- Every download/delete re-checks that the stored name stays inside UPLOADS_PATH
"""
