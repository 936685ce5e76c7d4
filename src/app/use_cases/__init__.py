"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, token refresh, logout
- verification/: OTP send/verify and password reset
- sessions/: Device session management
- roles/: Role catalogue and assignment
- users/: Current user profile
- maintenance/: Expiry sweeps

Import from subdirectories.
"""
