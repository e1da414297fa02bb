"""Host abstractions.

The browser-side collaborators (document root, scroll, media queries, the
interactive/idle lifecycle signal) modelled as plain objects with explicit
subscription handles.
"""
