"""Infrastructure layer: filesystem store, encryption, and git subprocess access.

Keystore is the single dependency injected into every service.
"""
