"""
Security module - Storage-format constants shared across FieldVault.
"""
