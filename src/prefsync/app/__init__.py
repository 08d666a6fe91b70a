"""Application layer: persistence, boot resolution and engine bootstrap.

Import `prefsync.app.bootstrap` for `create_engine`; this package module stays
import-light because the service layer depends on `storage` and `boot`.
"""
