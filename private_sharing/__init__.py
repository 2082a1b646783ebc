"""Example web application for digi.me private sharing.

A user is sent to digi.me to approve sharing data with this application;
when they come back the shared files are pulled, decrypted and logged.
"""

__version__ = "1.0.0"
