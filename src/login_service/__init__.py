"""Login Service: email/password and Google sign-in with server-side sessions."""
