"""Services Layer — story repository and transactional use cases.

Invariants:
    - Every service operation runs inside exactly one transaction
    - Repository is the only code that touches ORM rows
"""
