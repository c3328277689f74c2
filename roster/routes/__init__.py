"""HTTP routes: JSON API under /api/users and the server-rendered pages."""
