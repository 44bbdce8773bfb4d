"""Local file storage module for the portal.

This module saves uploaded files to a local directory tree, validates their
extensions against a configured whitelist, serves them back for download,
commits temporary uploads by stripping their ``.temp`` marker, and deletes
them.

Files are stored in: {root}/{sub_path}/{uuid}.{ext}[.temp]

No database tracks them; the filesystem is the only source of truth.
When the FTP transport is enabled the root directory is not created here.
"""
