"""
HTTP layer: routers, Jinja2 templates and response helpers.
"""
