"""
ledger_auth - credential verification, TOTP second factor and session tokens
"""
