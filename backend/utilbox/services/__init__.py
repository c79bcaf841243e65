"""
Utilbox Backend: Services Package
==================================

What:  Validation and business logic, independent of HTTP.

Service Inventory:
    - credential_store.py:    CredentialStore (startup load, exact-match find)
    - greeting_service.py:    GreetingService.receive()
    - auth_service.py:        AuthService.login()
    - hash_service.py:        HashService.digest()
    - calculator_service.py:  CalculatorService.calculate()

Services return response models on success and raise exceptions from
utilbox.exceptions on failure; they never build HTTP responses.
"""
