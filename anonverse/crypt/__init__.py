"""
The `crypt` package provides the cryptographic utilities behind the local
auth adapter.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `CredentialCrypto` class:
        * `hash_password` — hashes plaintext passwords using bcrypt
        * `check_passwords` — verifies a plaintext password against a hash
        * `is_valid_password` — password complexity policy:
            - minimum length (`settings.PASSWORD_MIN_LENGTH`)
            - must include lowercase, uppercase, digit, and special character
        * `generate_verification_code` — numeric confirmation codes (6 digits)
        * `issue_access_token` / `decode_access_token` — signed session tokens (JWT)
"""
