"""Document-level attributes: locale/theme reconciliation and scroll state.

Each attribute has exactly one writer. The synchronizer owns ``lang``,
``dir``, ``data-theme``, ``data-contrast`` and ``data-motion``; the scroll
observer owns ``data-masthead-scrolled``.
"""
