"""
Capabilities the client core consumes, and adapters implementing them.

Contents
--------
- auth_service
    `AuthService` interface (session lookup, session-change notifications,
    sign-in/up/out, confirmation resend) and `SessionEvent`.
- data_service
    `DataService` interface: table-scoped select/count/insert/update/delete
    with named joins and aggregate count descriptors.
- local_auth
    `LocalAuthService`: accounts in the SQL store, bcrypt hashes, signed
    session tokens, emailed confirmation codes.
- sql_data_service
    `SqlDataService`: `DataService` over the SQLAlchemy DAOs.
- mailer
    `SmtpMailer`: delivers confirmation codes over SMTP.
"""
