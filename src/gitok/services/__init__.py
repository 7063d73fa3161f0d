"""Service layer: business logic returning ServiceResult.

Services receive a Keystore and never print; interaction goes through a
Prompter supplied by the caller.
"""
