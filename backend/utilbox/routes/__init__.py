"""
Utilbox Backend: API Routes Package
====================================

Route Inventory:
    - greeting.py:   POST /api/greeting
    - auth.py:       POST /api/login
    - digest.py:     POST /api/hash
    - calculate.py:  POST /api/calculate
    - health.py:     GET  /health

Routes are thin: parse the body, call the service, return its model.
Errors propagate to the global exception handlers in main.py.
"""
