# Routes package init
"""
Notes API: Routes Package
=========================

Route Inventory:
    - health.py:  GET  /health     (liveness)
                  GET  /db-check   (database round-trip)
    - notes.py:   GET  /notes      (list notes, newest first)
                  POST /notes      (create a note)
    - posts.py:   GET  /posts      (first five upstream posts)

Routes are thin: they pull collaborators from dependencies, call a service,
and return a schema. Errors are raised, not rendered; main.py's exception
handlers turn them into JSON bodies.
"""
