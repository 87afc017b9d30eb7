"""Routing: the path table behind ``@app.route``.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Parser-printer routers live in
``wayline.urlrouting``.
"""
